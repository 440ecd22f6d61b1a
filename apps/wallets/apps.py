from django.apps import AppConfig  # type: ignore


class WalletsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.wallets"
    verbose_name = "Wallets"

    def ready(self) -> None:
        from shared.application.message_bus import message_bus

        from .events import WalletTransactionRecorded
        from .handlers import on_wallet_transaction_recorded

        message_bus.register_event_handler(WalletTransactionRecorded, on_wallet_transaction_recorded)
