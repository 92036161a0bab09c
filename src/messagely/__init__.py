"""Messagely: private user-to-user messaging.

Users register, log in with a password, and exchange directed text
messages. Only the two parties to a message can ever read it, and only
the recipient can mark it as read.
"""

__version__ = "0.1.0"
