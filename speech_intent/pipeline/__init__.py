"""Intent response pipeline."""

from speech_intent.pipeline.service import PipelineReply, SpeechService

__all__ = ["PipelineReply", "SpeechService"]
