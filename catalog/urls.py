from django.urls import path

from . import views

urlpatterns = [
    path('types/', views.TypeListView.as_view(), name='type-list'),

    # Admin: grades
    path('admin/grades/', views.AdminGradeListView.as_view(), name='admin-grades'),
    # "create" is also a valid grade name: the create views answer for it too
    path('admin/grades/create/', views.AdminGradeCreateView.as_view(), {'grade': 'create'}, name='admin-grade-create'),
    path('admin/grades/id/<uuid:pk>/', views.AdminGradeDeleteView.as_view(), name='admin-grade-delete'),
    path('admin/grades/<str:grade>/', views.AdminGradeFoldersDeleteView.as_view(), name='admin-grade-folders-delete'),

    # Admin: subjects
    path('admin/subjects/', views.AdminSubjectListView.as_view(), name='admin-subjects'),
    path('admin/subjects/create/', views.AdminSubjectCreateView.as_view(), {'grade': 'create'}, name='admin-subject-create'),
    path('admin/subjects/id/<uuid:pk>/', views.AdminSubjectDeleteView.as_view(), name='admin-subject-delete'),
    path('admin/subjects/<str:grade>/', views.AdminGradeSubjectFoldersView.as_view(), name='admin-grade-subject-folders'),
    path('admin/subjects/<str:grade>/<str:subject>/', views.AdminSubjectFoldersDeleteView.as_view(), name='admin-subject-folders-delete'),

    # Admin: mediums
    path('admin/mediums/', views.AdminMediumListView.as_view(), name='admin-mediums'),
    path('admin/mediums/<uuid:pk>/', views.AdminMediumDeleteView.as_view(), name='admin-medium-delete'),

    # PDFs
    path('pdfs/file/view/', views.PdfPathStreamView.as_view(), name='pdf-file-view'),
    path('pdfs/file/download/', views.PdfPathStreamView.as_view(as_attachment=True), name='pdf-file-download'),
    path('pdfs/<uuid:pk>/', views.PdfDetailView.as_view(), name='pdf-detail'),
    path('pdfs/<uuid:pk>/view/', views.PdfStreamView.as_view(), name='pdf-view'),
    path('pdfs/<uuid:pk>/download/', views.PdfStreamView.as_view(as_attachment=True), name='pdf-download'),
    path('pdfs/<str:type>/upload/', views.PdfUploadView.as_view(), name='pdf-upload'),
    path('pdfs/<str:type>/upload-multiple/', views.PdfUploadMultipleView.as_view(), name='pdf-upload-multiple'),

    # Users: browse by id
    path('users/<str:type>/grades/', views.GradesByTypeView.as_view(), name='grades-by-type'),
    path('users/<str:type>/<uuid:grade_id>/subjects/', views.SubjectsByGradeIdView.as_view(), name='subjects-by-grade'),
    path('users/<str:type>/<uuid:grade_id>/<uuid:subject_id>/mediums/', views.MediumsByIdsView.as_view(), name='mediums-by-subject'),
    path('users/<str:type>/<uuid:grade_id>/<uuid:subject_id>/pdfs/', views.PdfsByIdsView.as_view(), name='pdfs-by-subject'),

    # Browse by name
    path('browse/<str:type>/grades/', views.GradesByTypeView.as_view(), name='browse-grades'),
    path('browse/<str:type>/<str:grade>/subjects/', views.SubjectsByGradeNameView.as_view(), name='browse-subjects'),
    path('browse/<str:type>/<str:grade>/<str:subject>/mediums/', views.MediumsByNameView.as_view(), name='browse-mediums'),
    path('browse/<str:type>/<str:grade>/<str:subject>/pdfs/', views.PdfsByNameView.as_view(), name='browse-pdfs'),
]
