"""One-class-per-file implementations behind `voxchat_providers.base.models`."""
