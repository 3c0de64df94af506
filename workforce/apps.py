from django.apps import AppConfig


class WorkforceConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'workforce'
    verbose_name = 'Clinic workforce'
