"""pocket-unread — count the items saved in a Pocket account.

Authenticates through Pocket's OAuth handshake with a local callback
listener, then reports the number of saved items.
"""

from pocket_unread.version import __version__

__all__: list[str] = ["__version__"]
