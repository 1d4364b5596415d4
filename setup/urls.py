from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('accounts.urls')),
    path('clientes/', include('crm.urls')),
    path('pdv/', include('pdv.urls')),
    path('cozinha/', include('cozinha.urls')),
    path('relatorios/', include('relatorios.urls')),
] + static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
