"""
Application Layer

Contains the capability ports the playback domain is driven through.

Structure:
- interfaces/: Port interfaces for the audio engine and resource loader
"""
