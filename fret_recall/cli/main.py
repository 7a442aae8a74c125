"""Main entry point for the Fret Recall CLI."""

import queue
import time
from typing import Optional

import click
import pyfiglet

from ..core.config import ConfigManager, TunerConfig
from ..detection.pitch_tracker import PitchTracker
from ..logger import get_logger
from ..logging_config import setup_logging
from ..note_game_core import NoteGame
from ..note_matcher import AnswerMatcher
from ..note_utils import GUITAR_STRINGS, PITCH_CLASSES, pitch_class
from ..question_generator import Question, QuestionGenerator
from ..scales import ALL_SCALES, get_scale

logger = get_logger(__name__)

STRING_CHOICE = click.IntRange(0, len(GUITAR_STRINGS) - 1)


def _build_tuner_config(
    config_manager: ConfigManager, gain: Optional[float] = None, hold: Optional[float] = None
) -> TunerConfig:
    try:
        config = config_manager.get_tuner_config()
        changes = {}
        if gain is not None:
            changes["input_gain"] = gain
        if hold is not None:
            changes["required_hold"] = hold
        return config.replace(**changes) if changes else config
    except ValueError as e:
        raise click.ClickException(f"Invalid tuner configuration: {e}")


def _build_tracker(config: TunerConfig) -> PitchTracker:
    from ..audio.estimators import AubioYinEstimator

    logger.info("Tracker configuration: %s", config)
    return PitchTracker(AubioYinEstimator(), config)


def _open_microphone(ctx_obj, device, sample_rate, buffer):
    # sounddevice needs PortAudio at import time, only load it for live commands
    from ..audio.audio_input import SoundDeviceInput

    audio = ctx_obj["config_manager"].get_config("audio_input")
    # With no device set, SoundDeviceInput looks for a USB guitar adapter
    return SoundDeviceInput(
        device_id=device if device is not None else audio.get("device_id"),
        sample_rate=sample_rate or audio.get("sample_rate"),
        frames_per_buffer=buffer or audio.get("frames_per_buffer"),
        channels=audio.get("channels"),
    )


def _format_note(note) -> str:
    if note.is_empty:
        return "  -   |        |"
    return f"{str(note):<5} | {note.cents_off:+4d} c | {note.frequency:8.2f} Hz"


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding the JSON configuration (default ~/.config/fret_recall).",
)
@click.pass_context
def main(ctx, debug, config_dir):
    """Fret Recall - guitar ear training with a real-time tuner."""
    setup_logging(level="DEBUG" if debug else "WARNING")
    ctx.ensure_object(dict)
    ctx.obj["config_manager"] = ConfigManager(config_dir)


@main.command()
def devices():
    """List audio input devices."""
    from ..audio.audio_input import list_input_devices

    for device_id, device in list_input_devices():
        click.echo(
            f"[{device_id}] {device['name']} "
            f"(inputs: {device['max_input_channels']}, "
            f"{int(device['default_samplerate'])}Hz)"
        )


@main.command()
def scales():
    """List the note sets available for practice."""
    for scale in ALL_SCALES:
        click.echo(f"{scale.name:<10} {' '.join(scale.notes)}")


@main.command()
@click.option("--device", type=int, default=None, help="Audio input device ID.")
@click.option("--sample-rate", type=int, default=None, help="Sample rate in Hz.")
@click.option("--buffer", type=int, default=None, help="Frames per analysis window.")
@click.option("--gain", type=float, default=None, help="Input gain multiplier.")
@click.option("--duration", type=float, default=None, help="Stop after N seconds.")
@click.pass_obj
def tune(obj, device, sample_rate, buffer, gain, duration):
    """Show the played note, octave and cents deviation live."""
    config = _build_tuner_config(obj["config_manager"], gain=gain)
    tracker = _build_tracker(config)
    frames: "queue.Queue[tuple]" = queue.Queue()

    try:
        mic = _open_microphone(obj, device, sample_rate, buffer)
        mic.start(lambda samples, timestamp: frames.put((samples, timestamp)))
    except Exception as e:
        raise click.ClickException(f"Could not open audio input: {e}")

    click.echo("Listening... press Ctrl+C to stop.")
    started = time.monotonic()
    last_note = None
    try:
        while duration is None or time.monotonic() - started < duration:
            try:
                samples, timestamp = frames.get(timeout=0.5)
            except queue.Empty:
                continue
            note = tracker.process_frame(samples, mic.sample_rate, timestamp)
            if note != last_note:
                click.echo(_format_note(note))
                last_note = note
    except KeyboardInterrupt:
        pass
    finally:
        mic.stop()
        tracker.stop()


@main.command()
@click.option("--scale", "scale_name", default=None, help="Note set to practice (see 'scales').")
@click.option("--string", "string_index", type=STRING_CHOICE, default=None,
              help="Fix the target string (0 = high E, 5 = low E).")
@click.option("--duration", type=float, default=None, help="Game length in seconds.")
@click.option("--hold", type=float, default=None, help="Seconds a note must be held.")
@click.option("--device", type=int, default=None, help="Audio input device ID.")
@click.option("--sample-rate", type=int, default=None, help="Sample rate in Hz.")
@click.option("--buffer", type=int, default=None, help="Frames per analysis window.")
@click.pass_obj
def practice(obj, scale_name, string_index, duration, hold, device, sample_rate, buffer):
    """Find random notes on the fretboard."""
    game_config = obj["config_manager"].get_config("game")
    scale_name = scale_name or game_config.get("scale", "All notes")
    if string_index is None:
        string_index = game_config.get("string_index")
    if duration is None:
        duration = game_config.get("duration", 60)

    try:
        scale = get_scale(scale_name)
        generator = QuestionGenerator(
            available_notes=scale.notes, available_string=string_index
        )
    except ValueError as e:
        raise click.ClickException(str(e))

    config = _build_tuner_config(obj["config_manager"], hold=hold)
    game = NoteGame(_build_tracker(config), generator=generator)
    try:
        mic = _open_microphone(obj, device, sample_rate, buffer)
        mic.start(game.frame_received_callback)
    except Exception as e:
        raise click.ClickException(f"Could not open audio input: {e}")

    started = time.monotonic()
    question = game.start(started)
    _show_question(question)
    last_fret = None
    try:
        while not duration or time.monotonic() - started < duration:
            time.sleep(0.01)
            for result in game.process_events(mic.sample_rate):
                if result.detected_fret != last_fret and not result.note.is_empty:
                    click.echo(f"  heard {result.note} (fret {result.detected_fret})")
                    last_fret = result.detected_fret
                if result.newly_confirmed:
                    click.secho("Correct!", fg="green")
                    question = game.next_question(time.monotonic())
                    _show_question(question)
                    last_fret = None
                    break
    except KeyboardInterrupt:
        pass
    finally:
        mic.stop()
        game.stop()

    _show_summary(game.summary())


def _show_question(question) -> None:
    click.echo(pyfiglet.figlet_format(question.target_note_name))
    click.echo(f"Play {question.target_note_name} on {question.string}")


def _show_summary(summary) -> None:
    click.echo("\n===== Game Statistics =====")
    click.echo(f"Notes attempted: {summary['total_notes']}")
    click.echo(f"Notes completed: {summary['correct_notes']}")
    if summary["average_time"] is not None:
        click.echo(f"Average time per note: {summary['average_time']:.2f} seconds")
        click.echo(f"Fastest note: {summary['fastest_time']:.2f} seconds")
        click.echo(f"Slowest note: {summary['slowest_time']:.2f} seconds")
    if summary["notes_played"]:
        click.echo("\nNotes found:")
        for note, count in sorted(summary["notes_played"].items()):
            click.echo(f"  {note}: {count} times")


@main.command()
@click.argument("wav_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--target", default=None, help="Target note; reports when it is confirmed.")
@click.option("--string", "string_index", type=STRING_CHOICE, default=5,
              help="String used for the detected fret (default 5, low E).")
@click.option("--buffer", type=int, default=2048, help="Frames per analysis window.")
@click.option("--gain", type=float, default=None, help="Input gain multiplier.")
@click.pass_obj
def analyze(obj, wav_file, target, string_index, buffer, gain):
    """Run the tracker over a WAV file and print each note change."""
    from ..audio.wav_input import WavFileInput

    config = _build_tuner_config(obj["config_manager"], gain=gain)
    tracker = _build_tracker(config)
    source = WavFileInput(wav_file, chunk_size=buffer, realtime=False)

    matcher = question = None
    if target:
        if pitch_class(target) not in PITCH_CLASSES:
            raise click.BadParameter(f"Unknown note name: {target}", param_hint="--target")
        question = Question(string_index, pitch_class(target))
        matcher = AnswerMatcher.from_config(config)

    last_note = None
    confirmed_at = None
    for samples, timestamp in source.frames():
        note = tracker.process_frame(samples, source.sample_rate, timestamp)
        if note != last_note:
            fret = matcher.detected_fret(note, string_index) if matcher else None
            suffix = f" | fret {fret}" if fret is not None and fret >= 0 else ""
            click.echo(f"{timestamp:7.3f}s  {_format_note(note)}{suffix}")
            last_note = note
        if matcher and confirmed_at is None and matcher.check(note, question, timestamp):
            confirmed_at = timestamp

    if matcher:
        if confirmed_at is None:
            click.echo(f"Target {question.target_note_name} was not confirmed")
        else:
            click.echo(f"Target {question.target_note_name} confirmed at {confirmed_at:.3f}s")


if __name__ == "__main__":
    main()
