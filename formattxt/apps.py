from django.apps import AppConfig


class FormatTxtConfig(AppConfig):
    """Configuration for the formattxt Django app."""

    name = 'formattxt'
    verbose_name = 'FormatTxt'
