# users/urls.py

from django.urls import path

from .views import LoginView, MeView, RegisterView, StaffListView, StaffRoleView

app_name = "users"

urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("me/", MeView.as_view(), name="me"),
    # role assignment (users.manage)
    path("staff/", StaffListView.as_view(), name="staff-list"),
    path("staff/<uuid:pk>/", StaffRoleView.as_view(), name="staff-role"),
]
