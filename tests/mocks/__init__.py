"""Test doubles for platform add-ons."""

from tests.mocks.cluster import FakeHandle, RecordingClusterClient, ScriptedStep

__all__ = ["FakeHandle", "RecordingClusterClient", "ScriptedStep"]
