"""Stand-ins for the host collaborators: snapshot, visibility, listener."""

SNAPSHOT = {
    "language": "en-GB",
    "page_title": "Checkout",
    "pathname": "/checkout",
    "querystring": "?step=2",
    "referrer": "https://example.com/cart",
    "screen_height": 900,
    "screen_width": 1440,
    "user_agent": "pytest",
    "timezone": "Europe/London",
    "url": "https://example.com/checkout?step=2",
}


def fixed_snapshot() -> dict:
    return dict(SNAPSHOT)


class Recorder:
    """Listener that records every batch it receives."""

    def __init__(self):
        self.batches = []

    def __call__(self, batch):
        self.batches.append(batch)

    @property
    def events(self):
        return [event for batch in self.batches for event in batch]


class Visibility:
    """Visibility oracle a test can flip."""

    def __init__(self, visible: bool = True):
        self.visible = visible

    def __call__(self) -> bool:
        return self.visible


class Widget:
    """Minimal UI element: a tag, an optional id and a parent link."""

    def __init__(self, tag, id=None, parent=None):
        self.tag = tag
        self.id = id
        self.parent = parent
