# config/urls.py

from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # Aplicações principais
    path('', include('apps.core.urls')),
    path('kanban/', include('apps.kanban.urls')),
    path('relatorios/', include('apps.relatorios.urls')),

]

# Servir arquivos estáticos em desenvolvimento
if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)

# Customizar títulos do admin
admin.site.site_header = 'Gabinete Kanban Admin'
admin.site.site_title = 'Gabinete Kanban'
admin.site.index_title = 'Administração do Sistema'
