"""Puts the repository root on sys.path so the test suites import sqlconnector
from the working tree."""
