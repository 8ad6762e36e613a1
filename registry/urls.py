from django.urls import path

from . import views, views_admin

app_name = 'registry'

urlpatterns = [
    # ============ Home & Public Pages ============
    path('', views.home, name='home'),
    path('explore/', views.explore, name='explore'),
    path('explore/results/', views.explore_results, name='explore_results'),
    path('api/lands/', views.lands_api, name='lands_api'),

    # ============ Authentication ============
    path('auth/', views.auth_page, name='auth'),
    path('auth/sign-up/', views.sign_up_view, name='sign_up'),
    path('auth/sign-in/', views.sign_in_view, name='sign_in'),
    path('auth/sign-out/', views.sign_out_view, name='sign_out'),

    # ============ Dashboard ============
    path('dashboard/', views.dashboard, name='dashboard'),
    path('dashboard/register-land/', views.register_land, name='register_land'),
    path('dashboard/lands/fragment/', views.my_lands_fragment, name='my_lands_fragment'),
    path('dashboard/registrations/fragment/', views.my_registrations_fragment, name='my_registrations_fragment'),
    path('dashboard/events/', views.registration_events, name='registration_events'),

    # ============ Review (admin role) ============
    path('review/pending/fragment/', views_admin.pending_registrations_fragment, name='pending_fragment'),
    path('review/<int:registration_id>/approve/', views_admin.approve_registration, name='approve_registration'),
    path('review/<int:registration_id>/reject/', views_admin.reject_registration, name='reject_registration'),
    path('review/users/', views_admin.user_management, name='user_management'),
    path('review/users/<int:user_id>/role/', views_admin.update_user_role, name='update_user_role'),

    # ============ Maps ============
    path('maps/config/', views.map_config, name='map_config'),
    path('maps/key/', views.save_map_key, name='save_map_key'),
]
