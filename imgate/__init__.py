"""Building blocks for an instant-messaging gateway: channels, routing, service records, selection, logging and load reports."""

__version__ = "0.1.0"