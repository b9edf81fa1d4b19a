"""Entrypoint to launch the Telegram bot."""
from shame_engine.bot.main import main as bot_main


def main() -> None:
    bot_main()


if __name__ == "__main__":
    main()
