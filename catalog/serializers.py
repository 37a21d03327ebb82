from rest_framework import serializers

from .listing import DiscoveredFile
from .models import Grade, Medium, Pdf, Subject


class GradeSerializer(serializers.ModelSerializer):
    class Meta:
        model = Grade
        fields = ['id', 'name', 'normalized_name', 'description', 'created_at', 'updated_at']


class SubjectSerializer(serializers.ModelSerializer):
    class Meta:
        model = Subject
        fields = ['id', 'name', 'normalized_name', 'description', 'created_at', 'updated_at']


class MediumSerializer(serializers.ModelSerializer):
    class Meta:
        model = Medium
        fields = ['id', 'name', 'normalized_name', 'description', 'created_at', 'updated_at']


class NamedEntityCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)


class PdfSerializer(serializers.ModelSerializer):
    grade = GradeSerializer(read_only=True)
    subject = SubjectSerializer(read_only=True)

    class Meta:
        model = Pdf
        fields = [
            'id', 'name', 'filename', 'file_path', 'type', 'file_size', 'mime_type',
            'grade', 'subject', 'description', 'year', 'created_at', 'updated_at',
        ]


class PdfUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Pdf
        fields = ['name', 'description', 'year']


# ============================================
# LISTING ENTRIES (catalog row or folder on disk)
# ============================================

class ListingEntrySerializer(serializers.BaseSerializer):
    """
    Persisted entries render with persisted_serializer; Discovered ones (a
    folder with no catalog row) carry no id.
    """
    persisted_serializer = None

    def to_representation(self, entry):
        if entry.persisted:
            data = dict(self.persisted_serializer(entry.entity, context=self.context).data)
        else:
            data = {
                'id': None,
                'name': entry.name,
                'normalized_name': entry.slug,
                'description': None,
            }
        data['persisted'] = entry.persisted
        return data


class GradeEntrySerializer(ListingEntrySerializer):
    persisted_serializer = GradeSerializer


class SubjectEntrySerializer(ListingEntrySerializer):
    persisted_serializer = SubjectSerializer


class MediumEntrySerializer(ListingEntrySerializer):
    persisted_serializer = MediumSerializer


class PdfEntrySerializer(serializers.BaseSerializer):
    def to_representation(self, entry):
        if isinstance(entry, DiscoveredFile):
            return {
                'id': None,
                'name': entry.name,
                'filename': entry.filename,
                'file_path': entry.path,
                'file_size': entry.size,
                'created_at': serializers.DateTimeField().to_representation(entry.created_at),
                'updated_at': serializers.DateTimeField().to_representation(entry.updated_at),
                'persisted': False,
            }
        data = dict(PdfSerializer(entry.entity, context=self.context).data)
        data['persisted'] = True
        return data


class FolderSerializer(serializers.Serializer):
    name = serializers.CharField()
    item_count = serializers.IntegerField()


# ============================================
# REQUEST BODIES
# ============================================

class CreateMultipleGradesSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=Pdf.TYPE_CHOICES)
    grades = serializers.ListField(child=serializers.CharField(max_length=100), allow_empty=False)


class CreateMultipleSubjectsSerializer(serializers.Serializer):
    grade = serializers.CharField(max_length=100)
    subjects = serializers.ListField(child=serializers.CharField(max_length=100), allow_empty=False)
    medium = serializers.CharField(max_length=100, required=False, allow_blank=True)


class UploadPdfSerializer(serializers.Serializer):
    file = serializers.FileField()
    grade = serializers.CharField(max_length=100)
    subject = serializers.CharField(max_length=100)
    medium = serializers.CharField(max_length=100, required=False, allow_blank=True)
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)
    year = serializers.IntegerField(min_value=1900, max_value=2100, required=False, allow_null=True)


class UploadMultiplePdfsSerializer(serializers.Serializer):
    files = serializers.ListField(child=serializers.FileField(), allow_empty=False)
    names = serializers.ListField(child=serializers.CharField(max_length=255))
    grade = serializers.CharField(max_length=100)
    subject = serializers.CharField(max_length=100)
    medium = serializers.CharField(max_length=100, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    year = serializers.IntegerField(min_value=1900, max_value=2100, required=False, allow_null=True)
