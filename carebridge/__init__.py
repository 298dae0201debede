"""
CareBridge - Healthcare Appointment Backend

A FastAPI-based backend for user accounts, speech transcription with
speaker diarization, translation and LLM-assisted clinical workflows.
"""

__version__ = "1.0.0"
