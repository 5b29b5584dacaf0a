from django.urls import path

from . import views

urlpatterns = [
    path("register/",               views.RegisterView.as_view(),         name="auth-register"),
    path("login/",                  views.LoginView.as_view(),            name="auth-login"),
    path("2fa/login/",              views.TwoFactorLoginView.as_view(),   name="auth-2fa-login"),
    path("2fa/setup/",              views.TwoFactorSetupView.as_view(),   name="auth-2fa-setup"),
    path("2fa/verify/",             views.TwoFactorVerifyView.as_view(),  name="auth-2fa-verify"),
    path("2fa/disable/",            views.TwoFactorDisableView.as_view(), name="auth-2fa-disable"),
    path("forgot-password/",        views.ForgotPasswordView.as_view(),   name="auth-forgot-password"),
    path("reset-password/<str:token>/", views.ResetPasswordView.as_view(), name="auth-reset-password"),
    path("me/",                     views.MeView.as_view(),               name="auth-me"),
    path("update-me/",              views.UpdateMeView.as_view(),         name="auth-update-me"),
    path("update-password/",        views.UpdatePasswordView.as_view(),   name="auth-update-password"),
]
