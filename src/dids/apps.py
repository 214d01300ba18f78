from django.apps import AppConfig


class DidsConfig(AppConfig):
    name = "src.dids"
    label = "dids"
    verbose_name = "DID parsing"
