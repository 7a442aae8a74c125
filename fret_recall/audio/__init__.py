"""Audio adapters: capture inputs and frequency estimators.

Submodules are imported directly (e.g. ``fret_recall.audio.audio_input``) so
that only the audio libraries actually needed get loaded.
"""
