"""Capture layer: camera devices and the frame sampling loop."""

from pycheckin.capture.device import CaptureDevice
from pycheckin.capture.source import DecodeSource

__all__ = ["CaptureDevice", "DecodeSource"]
