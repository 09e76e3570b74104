from .celery import celery_app

# 'from ug_project import *' only exports celery_app
__all__ = ("celery_app",)

""" Workers start with "celery -A ug_project worker -l info".
    Beat (planner markers) runs with "celery -A ug_project beat". """
