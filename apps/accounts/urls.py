from django.urls import path
from . import views

app_name = 'auth'

urlpatterns = [
    path('register/', views.register, name='register'),
    path('admin/register/', views.admin_register, name='admin-register'),
    path('login/', views.login, name='login'),
    path('me/', views.get_current_user, name='current-user'),
]
