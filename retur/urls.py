"""
Retur Module URL Configuration

'retur/undo' is listed before 'retur/<retur_id>' so it is never read as an id.
Ids are captured as strings and parsed in the view, so a bad id is a 400.
"""

from django.urls import path
from . import views

urlpatterns = [
    path('retur', views.retur_collection, name='retur-collection'),
    path('retur/undo', views.undo_delete, name='retur-undo'),
    path('retur/<str:retur_id>', views.get_retur_detail, name='retur-detail'),
    path('retur/<str:retur_id>/approve', views.approve_retur, name='retur-approve'),
    path('retur/<str:retur_id>/delete', views.delete_retur, name='retur-delete'),
]
