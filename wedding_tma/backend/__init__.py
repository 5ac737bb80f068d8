"""Backend application for the wedding Mini App."""
