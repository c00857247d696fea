"""Tests for :mod:`authengine`."""
