"""Users app package.

Defines the platform user with a closed set of roles (player, facility
owner, staff member, tournament organizer, admin). Use
``apps.users.models.CustomUser`` as the AUTH_USER_MODEL throughout
the project.
"""
