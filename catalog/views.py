from django.http import FileResponse
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import Pdf
from .serializers import (
    CreateMultipleGradesSerializer,
    CreateMultipleSubjectsSerializer,
    FolderSerializer,
    GradeEntrySerializer,
    GradeSerializer,
    MediumEntrySerializer,
    MediumSerializer,
    NamedEntityCreateSerializer,
    PdfEntrySerializer,
    PdfSerializer,
    PdfUpdateSerializer,
    SubjectEntrySerializer,
    SubjectSerializer,
    UploadMultiplePdfsSerializer,
    UploadPdfSerializer,
)
from .services import PdfService, UploadedPdf


class CatalogAPIView(APIView):
    """Base: no auth on this API, one PdfService per request."""
    permission_classes = [AllowAny]

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        self.service = PdfService()


def pdf_file_response(pdf_stream, as_attachment):
    response = FileResponse(
        pdf_stream.stream,
        as_attachment=as_attachment,
        filename=pdf_stream.filename,
        content_type=Pdf.MIME_TYPE,
    )
    response['Content-Length'] = str(pdf_stream.size)
    return response


# ============================================
# TYPES
# ============================================

class TypeListView(CatalogAPIView):
    """GET /api/types/ - syllabus / past-papers folders with item counts."""

    def get(self, request):
        serializer = FolderSerializer(self.service.listing.list_types(), many=True)
        return Response(serializer.data)


# ============================================
# ADMIN - GRADES
# ============================================

class AdminGradeListView(CatalogAPIView):
    """
    GET  /api/admin/grades/ - all grades in the catalog.
    POST /api/admin/grades/ - {type, grades[]}: find-or-create each grade and its <type>/<grade> folder.
    """

    def get(self, request):
        serializer = GradeSerializer(self.service.grades.list(), many=True)
        return Response(serializer.data)

    def post(self, request):
        serializer = CreateMultipleGradesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.service.create_grade_folders(
            serializer.validated_data['type'],
            serializer.validated_data['grades'],
        )
        return Response(result, status=status.HTTP_201_CREATED if result['success'] else status.HTTP_200_OK)


class AdminGradeFoldersDeleteView(CatalogAPIView):
    """DELETE /api/admin/grades/<grade>/ - remove the grade's folders (only if empty)."""

    def delete(self, request, grade):
        removed = self.service.delete_grade_folders(grade)
        return Response({'detail': f'Grade folders deleted successfully for "{grade}"', 'folders': removed})


class AdminGradeCreateView(AdminGradeFoldersDeleteView):
    """
    POST   /api/admin/grades/create/ - create one grade record (no folders).
    DELETE /api/admin/grades/create/ - folders of the grade named "create".
    """

    def post(self, request, **kwargs):
        serializer = NamedEntityCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        grade = self.service.grades.create(**serializer.validated_data)
        return Response(GradeSerializer(grade).data, status=status.HTTP_201_CREATED)


class AdminGradeDeleteView(CatalogAPIView):
    """DELETE /api/admin/grades/id/<id>/ - delete a grade record (only without PDFs)."""

    def delete(self, request, pk):
        self.service.grades.delete(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ============================================
# ADMIN - SUBJECTS
# ============================================

class AdminSubjectListView(CatalogAPIView):
    """
    GET  /api/admin/subjects/ - all subjects in the catalog.
    POST /api/admin/subjects/ - {grade, subjects[], medium?}: subject folders under both types.
    """

    def get(self, request):
        serializer = SubjectSerializer(self.service.subjects.list(), many=True)
        return Response(serializer.data)

    def post(self, request):
        serializer = CreateMultipleSubjectsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.service.create_subject_folders(
            serializer.validated_data['grade'],
            serializer.validated_data['subjects'],
            serializer.validated_data.get('medium') or None,
        )
        return Response(result, status=status.HTTP_201_CREATED if result['success'] else status.HTTP_200_OK)


class AdminGradeSubjectFoldersView(CatalogAPIView):
    """GET /api/admin/subjects/<grade>/ - subject folder names for a grade (both types)."""

    def get(self, request, grade):
        return Response(self.service.listing.list_subject_folders(grade))


class AdminSubjectCreateView(AdminGradeSubjectFoldersView):
    """
    POST /api/admin/subjects/create/ - create one subject record (no folders).
    GET  /api/admin/subjects/create/ - subject folders of the grade named "create".
    """

    def post(self, request, **kwargs):
        serializer = NamedEntityCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        subject = self.service.subjects.create(**serializer.validated_data)
        return Response(SubjectSerializer(subject).data, status=status.HTTP_201_CREATED)


class AdminSubjectFoldersDeleteView(CatalogAPIView):
    """DELETE /api/admin/subjects/<grade>/<subject>/ - remove subject folders (only if empty)."""

    def delete(self, request, grade, subject):
        removed = self.service.delete_subject_folders(grade, subject)
        return Response({
            'detail': f'Subject folders deleted successfully for "{subject}" in grade "{grade}"',
            'folders': removed,
        })


class AdminSubjectDeleteView(CatalogAPIView):
    """DELETE /api/admin/subjects/id/<id>/ - delete a subject record (only without PDFs)."""

    def delete(self, request, pk):
        self.service.subjects.delete(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ============================================
# ADMIN - MEDIUMS
# ============================================

class AdminMediumListView(CatalogAPIView):
    """GET / POST /api/admin/mediums/ - list or create mediums."""

    def get(self, request):
        serializer = MediumSerializer(self.service.mediums.list(), many=True)
        return Response(serializer.data)

    def post(self, request):
        serializer = NamedEntityCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        medium = self.service.mediums.create(**serializer.validated_data)
        return Response(MediumSerializer(medium).data, status=status.HTTP_201_CREATED)


class AdminMediumDeleteView(CatalogAPIView):
    """DELETE /api/admin/mediums/<id>/ - delete a medium (only while none of its folders hold PDFs)."""

    def delete(self, request, pk):
        self.service.mediums.delete(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ============================================
# PDFS - UPLOAD / DETAIL / STREAM
# ============================================

class PdfUploadView(CatalogAPIView):
    """POST /api/pdfs/<type>/upload/ - upload one PDF (multipart)."""
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request, type):
        serializer = UploadPdfSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        pdf = self.service.upload_pdf(
            type,
            data['grade'],
            data['subject'],
            data.get('medium') or None,
            UploadedPdf.from_django(data['file']),
            data['name'],
            description=data.get('description') or None,
            year=data.get('year'),
        )
        return Response(PdfSerializer(pdf).data, status=status.HTTP_201_CREATED)


class PdfUploadMultipleView(CatalogAPIView):
    """POST /api/pdfs/<type>/upload-multiple/ - files[] + names[] (same length)."""
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request, type):
        serializer = UploadMultiplePdfsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = self.service.upload_many(
            type,
            data['grade'],
            data['subject'],
            data.get('medium') or None,
            [UploadedPdf.from_django(f) for f in data['files']],
            data['names'],
            description=data.get('description') or None,
            year=data.get('year'),
        )
        for item in result['results']:
            if 'pdf' in item:
                item['pdf'] = PdfSerializer(item['pdf']).data
        return Response(result, status=status.HTTP_201_CREATED if result['success'] else status.HTTP_200_OK)


class PdfDetailView(CatalogAPIView):
    """GET / PATCH / DELETE /api/pdfs/<id>/"""
    parser_classes = [JSONParser, FormParser, MultiPartParser]

    def get(self, request, pk):
        pdf = self.service.pdfs.find_by_id(pk)
        return Response(PdfSerializer(pdf).data)

    def patch(self, request, pk):
        pdf = self.service.pdfs.find_by_id(pk)
        serializer = PdfUpdateSerializer(pdf, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        pdf = self.service.update_pdf(pk, **serializer.validated_data)
        return Response(PdfSerializer(pdf).data)

    def delete(self, request, pk):
        self.service.delete_pdf(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


class PdfStreamView(CatalogAPIView):
    """GET /api/pdfs/<id>/view/ (inline) and /api/pdfs/<id>/download/ (attachment)."""
    as_attachment = False

    def get(self, request, pk):
        return pdf_file_response(self.service.stream_by_id(pk), self.as_attachment)


class PdfPathStreamView(CatalogAPIView):
    """GET /api/pdfs/file/view/?path=... and /api/pdfs/file/download/?path=..."""
    as_attachment = False

    def get(self, request):
        file_path = request.query_params.get('path', '')
        return pdf_file_response(self.service.stream_by_path(file_path), self.as_attachment)


# ============================================
# USERS - BROWSING BY ID
# ============================================

class GradesByTypeView(CatalogAPIView):
    """GET /api/users/<type>/grades/ - grades with PDFs or folders of this type."""

    def get(self, request, type):
        entries = self.service.listing.list_grades(type)
        return Response(GradeEntrySerializer(entries, many=True).data)


class SubjectsByGradeIdView(CatalogAPIView):
    """GET /api/users/<type>/<grade_id>/subjects/"""

    def get(self, request, type, grade_id):
        entries = self.service.listing.list_subjects_by_grade_id(type, grade_id)
        return Response(SubjectEntrySerializer(entries, many=True).data)


class MediumsByIdsView(CatalogAPIView):
    """GET /api/users/<type>/<grade_id>/<subject_id>/mediums/"""

    def get(self, request, type, grade_id, subject_id):
        entries = self.service.listing.list_mediums_by_ids(type, grade_id, subject_id)
        return Response(MediumEntrySerializer(entries, many=True).data)


class PdfsByIdsView(CatalogAPIView):
    """GET /api/users/<type>/<grade_id>/<subject_id>/pdfs/?medium=english"""

    def get(self, request, type, grade_id, subject_id):
        medium = request.query_params.get('medium') or None
        entries = self.service.listing.list_pdfs_by_ids(type, grade_id, subject_id, medium)
        return Response(PdfEntrySerializer(entries, many=True).data)


# ============================================
# BROWSE - BY NAME (also reaches folder-only grades/subjects)
# ============================================

class SubjectsByGradeNameView(CatalogAPIView):
    """GET /api/browse/<type>/<grade>/subjects/"""

    def get(self, request, type, grade):
        entries = self.service.listing.list_subjects(type, grade)
        return Response(SubjectEntrySerializer(entries, many=True).data)


class MediumsByNameView(CatalogAPIView):
    """GET /api/browse/<type>/<grade>/<subject>/mediums/"""

    def get(self, request, type, grade, subject):
        entries = self.service.listing.list_mediums(type, grade, subject)
        return Response(MediumEntrySerializer(entries, many=True).data)


class PdfsByNameView(CatalogAPIView):
    """GET /api/browse/<type>/<grade>/<subject>/pdfs/?medium=english"""

    def get(self, request, type, grade, subject):
        medium = request.query_params.get('medium') or None
        entries = self.service.listing.list_pdfs(type, grade, subject, medium)
        return Response(PdfEntrySerializer(entries, many=True).data)
