"""Transient user notifications (the toast surface)."""

from flask import flash, get_flashed_messages


class Notifier:
    """Records success and error notifications for the acting user."""

    def success(self, title):
        self.notify('success', title)

    def error(self, title, description=None):
        self.notify('error', title if description is None else f"{title}: {description}")

    def notify(self, category, message):
        raise NotImplementedError


class FlashNotifier(Notifier):
    """Queues notifications in the session via flask.flash."""

    def notify(self, category, message):
        flash(message, category)


class RecordingNotifier(Notifier):
    """Keeps notifications in memory; used outside a request."""

    def __init__(self):
        self.messages = []

    def notify(self, category, message):
        self.messages.append((category, message))


def drain_notifications():
    """Pop every queued notification for the current session."""
    return [
        {'category': category, 'message': message}
        for category, message in get_flashed_messages(with_categories=True)
    ]
