from django.apps import AppConfig


class EgressesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.egresses'
    label = 'egresses'
    verbose_name = 'Egresses'
