"""Remote recipient persistence."""

from notifyy.storage.cloudant import CloudantRecipientStore

__all__ = ["CloudantRecipientStore"]
