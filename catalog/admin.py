from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html

from .forms import NamedEntityAdminForm
from .models import Grade, Medium, Pdf, Subject
from .services import PdfService
from .store import GradeStore, MediumStore, SubjectStore


class NamedEntityAdmin(admin.ModelAdmin):
    """normalized_name is always derived from name, never typed in."""
    form = NamedEntityAdminForm
    list_display = ['name', 'normalized_name', 'created_at']
    search_fields = ['name', 'normalized_name']
    readonly_fields = ['normalized_name', 'created_at', 'updated_at']
    fields = ['name', 'normalized_name', 'description', 'created_at', 'updated_at']
    store_class = None

    def get_form(self, request, obj=None, **kwargs):
        form = super().get_form(request, obj, **kwargs)
        form.store = self.store_class()
        return form

    def save_model(self, request, obj, form, change):
        obj.name = form.cleaned_data['name']
        obj.normalized_name = form.cleaned_data['normalized_name']
        super().save_model(request, obj, form, change)


@admin.register(Grade)
class GradeAdmin(NamedEntityAdmin):
    list_display = ['name', 'normalized_name', 'pdf_count', 'created_at']
    store_class = GradeStore

    def pdf_count(self, obj):
        count = obj.pdfs.count()
        url = reverse('admin:catalog_pdf_changelist') + f'?grade__id__exact={obj.id}'
        return format_html('<a href="{}">{} PDFs</a>', url, count)
    pdf_count.short_description = 'PDFs'


@admin.register(Subject)
class SubjectAdmin(NamedEntityAdmin):
    list_display = ['name', 'normalized_name', 'pdf_count', 'created_at']
    store_class = SubjectStore

    def pdf_count(self, obj):
        count = obj.pdfs.count()
        url = reverse('admin:catalog_pdf_changelist') + f'?subject__id__exact={obj.id}'
        return format_html('<a href="{}">{} PDFs</a>', url, count)
    pdf_count.short_description = 'PDFs'


@admin.register(Medium)
class MediumAdmin(NamedEntityAdmin):
    store_class = MediumStore


@admin.register(Pdf)
class PdfAdmin(admin.ModelAdmin):
    list_display = ['name', 'type', 'year', 'grade_link', 'subject_link', 'size_kb', 'file_link']
    list_filter = ['type', 'year', 'grade', 'subject']
    search_fields = ['name', 'filename', 'grade__name', 'subject__name']
    list_select_related = ['grade', 'subject']
    readonly_fields = ['filename', 'file_path', 'type', 'file_size', 'mime_type', 'grade', 'subject',
                       'created_at', 'updated_at']
    fieldsets = (
        ('Basic Info', {
            'fields': ('name', 'description', 'year')
        }),
        ('Storage', {
            'fields': ('type', 'grade', 'subject', 'filename', 'file_path', 'file_size', 'mime_type')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at')
        }),
    )

    # Uploads go through /api/pdfs/<type>/upload/ so the file and row stay in step
    def has_add_permission(self, request):
        return False

    def delete_model(self, request, obj):
        PdfService().delete_pdf(obj.pk)

    def delete_queryset(self, request, queryset):
        service = PdfService()
        for pdf in queryset:
            service.delete_pdf(pdf.pk)

    def grade_link(self, obj):
        url = reverse('admin:catalog_grade_change', args=[obj.grade.id])
        return format_html('<a href="{}">{}</a>', url, obj.grade.name)
    grade_link.short_description = 'Grade'

    def subject_link(self, obj):
        url = reverse('admin:catalog_subject_change', args=[obj.subject.id])
        return format_html('<a href="{}">{}</a>', url, obj.subject.name)
    subject_link.short_description = 'Subject'

    def size_kb(self, obj):
        return f'{obj.file_size / 1024:.1f} KB'
    size_kb.short_description = 'Size'

    def file_link(self, obj):
        url = reverse('pdf-view', args=[obj.id])
        return format_html('<a href="{}" target="_blank">View PDF</a>', url)
    file_link.short_description = 'File'
