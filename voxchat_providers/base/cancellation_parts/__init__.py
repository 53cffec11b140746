"""Cancellation implementation modules behind `voxchat_providers.base.cancellation`."""
