"""
SonicVision Studio
Prompt-to-music and paired image generation with playback and gallery state
"""

__version__ = "0.1.0"
