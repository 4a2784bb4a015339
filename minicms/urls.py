from django.conf import settings
from django.urls import include, path

urlpatterns = [
    path('', include('blog.urls')),
]

if settings.DEBUG_TOOLBAR:
    urlpatterns.append(path('__debug__/', include('debug_toolbar.urls')))
