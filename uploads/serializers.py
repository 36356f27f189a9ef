from rest_framework import serializers

from .models import Upload


class UploadSerializer(serializers.ModelSerializer):
    originalName = serializers.CharField(source='original_name', read_only=True)
    organizationId = serializers.IntegerField(source='organization_id', read_only=True)
    uploadedBy = serializers.IntegerField(source='uploaded_by_id', read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Upload
        fields = [
            'id', 'filename', 'originalName', 'url', 'mimetype', 'size',
            'organizationId', 'uploadedBy', 'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class DeleteFilesSerializer(serializers.Serializer):
    fileIds = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        allow_empty=False,
        max_length=100,
    )
