from django.urls import path

from . import views

urlpatterns = [
    path("",                 views.MessageListCreateView.as_view(), name="message-list"),
    path("<int:pk>/reply/",  views.MessageReplyView.as_view(),      name="message-reply"),
]
