"""Relay bot daemon entry point.

This daemon long-polls Telegram for text, voice and audio messages,
transcribes media with AssemblyAI and answers with a chat-completion
provider. Reply language preferences are kept in memory only.

Usage:
    python -m relaybot.cli.daemon
    python -m relaybot.cli.daemon --verbose
"""

import argparse
import asyncio
import logging
import signal
import sys
from typing import NoReturn

from dotenv import load_dotenv

from relaybot import __version__
from relaybot.lib.config import (
    get_completion_config,
    get_telegram_config,
    get_transcription_config,
)
from relaybot.lib.exceptions import ConfigurationError
from relaybot.services.dispatcher import Dispatcher
from relaybot.services.llm import create_completion_client
from relaybot.services.preferences.store import PreferenceStore
from relaybot.services.telegram.bot import TelegramBotAdapter
from relaybot.services.transcription.assemblyai import AssemblyAITranscriptionService

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the daemon."""
    level = logging.DEBUG if verbose else logging.INFO
    format_str = "[%(asctime)s] %(levelname)s: %(message)s"
    logging.basicConfig(
        level=level,
        format=format_str,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # httpx logs every request at INFO, including the bot token in URLs
    logging.getLogger("httpx").setLevel(logging.WARNING)


def validate_configuration() -> bool:
    """
    Validate configuration before starting.

    The Telegram token is required. Missing transcription or completion
    credentials only produce warnings; those calls fail individually.
    """
    telegram_config = get_telegram_config()
    transcription_config = get_transcription_config()
    completion_config = get_completion_config()

    try:
        telegram_config.require_token()
    except ConfigurationError as e:
        logger.error(e.message)
        return False

    if not transcription_config.is_configured():
        logger.warning("ASSEMBLY_API_KEY is not set; voice and audio messages will fail.")

    try:
        completion_config.validate_provider_config()
    except ConfigurationError as e:
        logger.warning(f"{e.message} Questions will not be answered.")

    downloads_path = telegram_config.downloads_path
    if not downloads_path.exists():
        logger.info(f"Creating downloads directory: {downloads_path}")
        downloads_path.mkdir(parents=True, exist_ok=True)

    logger.info(f"Downloads: {downloads_path.absolute()}")
    logger.info(f"Completion provider: {completion_config.provider}")

    return True


async def run_daemon() -> NoReturn:
    """Main daemon loop."""
    logger.info("Starting relay bot daemon...")

    telegram_config = get_telegram_config()
    transcription_config = get_transcription_config()
    completion_config = get_completion_config()

    try:
        completer = create_completion_client(completion_config)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    transcriber = AssemblyAITranscriptionService(transcription_config)
    bot = TelegramBotAdapter(telegram_config)

    dispatcher = Dispatcher(
        chat=bot,
        preferences=PreferenceStore(),
        transcriber=transcriber,
        completer=completer,
        downloads_dir=telegram_config.downloads_path,
    )
    bot.on_event(dispatcher.dispatch)

    await bot.start()
    dispatcher.bot_username = bot.username

    logger.info("Daemon running. Press Ctrl+C to stop.")

    try:
        # Keep running until cancelled
        while True:
            await asyncio.sleep(1)
    except asyncio.CancelledError:
        pass
    finally:
        await bot.stop()
        await transcriber.close()
        await completer.close()
        logger.info("Daemon stopped.")


def signal_handler(signum: int, frame) -> None:
    """Handle shutdown signals gracefully."""
    logger.info(f"Received signal {signum}, initiating shutdown...")
    sys.exit(0)


def main() -> int:
    """Entry point for the daemon."""
    parser = argparse.ArgumentParser(
        prog="relaybot",
        description="Telegram relay bot: transcribe voice, answer with an LLM",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    args = parser.parse_args()

    # Provider fallbacks such as OPENAI_MODEL are read from os.environ
    load_dotenv()

    setup_logging(verbose=args.verbose)

    # Register signal handlers for graceful shutdown
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    if not validate_configuration():
        logger.error("Configuration validation failed. Exiting.")
        return 1

    try:
        asyncio.run(run_daemon())
    except KeyboardInterrupt:
        logger.info("Daemon stopped by user.")
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e.message}")
        return 1
    except Exception as e:
        logger.exception(f"Daemon failed with error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
