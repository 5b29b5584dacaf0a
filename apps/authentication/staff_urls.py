from django.urls import path

from . import staff_views as views

staff_urlpatterns = [
    path("",            views.StaffListCreateView.as_view(), name="staff-list"),
    path("summary/",    views.StaffSummaryView.as_view(),    name="staff-summary"),
    path("list/",       views.StaffBriefListView.as_view(),  name="staff-brief-list"),
    path("<uuid:pk>/",  views.StaffDetailView.as_view(),     name="staff-detail"),
]

customer_urlpatterns = [
    path("",            views.CustomerListView.as_view(),    name="customer-list"),
    path("<uuid:pk>/",  views.CustomerDetailView.as_view(),  name="customer-detail"),
]
