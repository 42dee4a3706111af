"""Mail Assist: email drafting add-in panel and completion relay."""

__version__ = "0.1.0"
