from rest_framework import serializers

from .fields import CleanCharField, optional_text


class ReportUploadSerializer(serializers.Serializer):
    patientId = serializers.CharField(max_length=64)
    fileName = serializers.RegexField(r'^[^/\\]+$', max_length=200,
                                      error_messages={'invalid': 'File name must not contain path separators'})
    fileData = serializers.CharField(trim_whitespace=True)
    fileType = serializers.CharField(max_length=128, required=False, allow_blank=True)
    reportType = CleanCharField(max_length=64, required=False, allow_blank=True)
    description = optional_text()
