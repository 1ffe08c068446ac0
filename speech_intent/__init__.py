"""speech_intent - turns transcribed speech into contact and task records."""

__version__ = "0.1.0"
__logo__ = "🎙"
