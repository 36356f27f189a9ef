from rest_framework import serializers


class RenderPdfSerializer(serializers.Serializer):
    html = serializers.CharField(trim_whitespace=False)
    filename = serializers.CharField(max_length=200)

    def validate_filename(self, value):
        if not value.strip():
            raise serializers.ValidationError('Filename must not be blank.')
        return value
