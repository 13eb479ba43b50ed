"""Test configuration and fixtures for the address book service."""

from tests.fixtures import *  # noqa: F401,F403
