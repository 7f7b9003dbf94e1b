import argparse
import logging
import signal
import sys
from typing import Optional

from app_config import (
    AppConfig,
    AppConfigurationError,
    load_app_config,
    load_secret_config,
)
from notes import JsonFileKeyValueStore, NotesStore
from runtime import ConsoleDependencies, ConsoleRuntime
from speaking_timer import SpeechSink, ThreadingIntervalScheduler
from tts import SilentSpeechService, SpeechService, TTSConfig, TTSError


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("time_tell")


def setup_signal_handlers() -> None:
    """Turn SIGTERM and SIGINT into KeyboardInterrupt on the main thread.

    The handler only raises; shutdown runs in `run_console` once the
    interrupted code has released the timer lock.
    """

    def signal_handler(signum: int, frame) -> None:
        signal_name = signal.Signals(signum).name
        logging.getLogger("time_tell").info("%s received, stopping", signal_name)
        raise KeyboardInterrupt

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def build_speech_sink(app_config: AppConfig, hf_token: Optional[str]) -> SpeechSink:
    """Create the Piper-backed speech service, or a silent sink when TTS is off."""
    if not app_config.tts.enabled:
        return SilentSpeechService(logger=logging.getLogger("tts"))

    # Imported lazily so the audio stack is only required with TTS enabled.
    from tts.engine import PiperTTSEngine
    from tts.output import SoundDeviceAudioOutput

    tts_config = TTSConfig.from_settings(app_config.tts, hf_token=hf_token)
    engine = PiperTTSEngine(config=tts_config, logger=logging.getLogger("tts.engine"))
    output = SoundDeviceAudioOutput(
        output_device_index=tts_config.output_device_index,
        logger=logging.getLogger("tts.output"),
    )
    return SpeechService(engine=engine, output=output, logger=logging.getLogger("tts"))


def run_console(runtime: ConsoleRuntime, logger: logging.Logger) -> int:
    try:
        return runtime.run()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        return 0
    finally:
        runtime.shutdown()


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Speaking count-up timer with notes.")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.toml (defaults to $APP_CONFIG_FILE or ./config.toml).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    """Run the speaking timer in the terminal."""
    args = parse_args(argv)
    logger = setup_logging(level=logging.INFO)

    try:
        app_config = load_app_config(args.config, allow_missing=args.config is None)
        secret_config = load_secret_config()
    except AppConfigurationError as error:
        logger.error("App configuration error: %s", error)
        return 1

    logging.getLogger().setLevel(app_config.app.log_level)
    if app_config.source_file:
        logger.info("Loaded runtime config: %s", app_config.source_file)
    else:
        logger.info("No config file found, using defaults")

    try:
        speech = build_speech_sink(app_config, secret_config.hf_token)
    except TTSError as error:
        logger.error("TTS initialization error: %s", error)
        return 1
    logger.info("TTS %s", "enabled" if app_config.tts.enabled else "disabled")

    notes = NotesStore(
        JsonFileKeyValueStore(app_config.notes.store_file),
        logger=logging.getLogger("notes"),
    )
    runtime = ConsoleRuntime(
        ConsoleDependencies(
            scheduler=ThreadingIntervalScheduler(logger=logging.getLogger("ticks")),
            speech=speech,
            notes=notes,
            stdin=sys.stdin,
            stdout=sys.stdout,
            logger=logger,
            show_ticks=app_config.console.show_ticks,
        )
    )
    setup_signal_handlers()
    return run_console(runtime, logger)


if __name__ == "__main__":
    sys.exit(main())
