"""
NexusMail Engine

Messaging and support-chat state engine: mailbox, templates,
support sessions and the draft assistant gateway.
"""

__version__ = "0.1.0"
