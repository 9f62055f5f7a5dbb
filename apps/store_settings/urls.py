from django.urls import path
from . import views

app_name = 'store_settings'

urlpatterns = [
    # GET  /api/settings/ - Read settings
    # POST /api/settings/ - Upsert a setting
    path('', views.settings_view, name='settings'),
]
