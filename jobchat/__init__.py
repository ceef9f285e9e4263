"""Messaging and notification core of the job board platform."""
