"""
Serializers for society registration and approval endpoints.

Request field names are camelCase; validated_data comes out snake_case for
the service layer.
"""

from rest_framework import serializers

from apps.societies.models import Society, SocietyDocument, SocietyStatus, SocietyType
from apps.users.serializers import AdminContactSerializer


class SocietyRegistrationSerializer(serializers.Serializer):
    """Textual fields of the multipart registration request."""

    societyName = serializers.CharField(source="society_name", max_length=255)
    registrationNumber = serializers.CharField(
        source="registration_number", max_length=100
    )
    societyType = serializers.ChoiceField(
        source="society_type", choices=SocietyType.choices
    )
    establishmentDate = serializers.DateField(source="establishment_date")
    societyAddress = serializers.CharField(source="society_address")
    adminName = serializers.CharField(source="admin_name", max_length=255)
    adminEmail = serializers.EmailField(source="admin_email", max_length=255)
    adminPhone = serializers.CharField(source="admin_phone", max_length=20)
    password = serializers.CharField(write_only=True, min_length=1)


class DocumentSerializer(serializers.ModelSerializer):
    documentType = serializers.CharField(source="document_type", read_only=True)
    fileName = serializers.CharField(source="file_name", read_only=True)
    fileSize = serializers.IntegerField(source="file_size", read_only=True)
    mimeType = serializers.CharField(source="mime_type", read_only=True)
    uploadedAt = serializers.DateTimeField(source="uploaded_at", read_only=True)

    class Meta:
        model = SocietyDocument
        fields = ["id", "documentType", "fileName", "fileSize", "mimeType", "uploadedAt"]
        read_only_fields = fields


class SocietySerializer(serializers.ModelSerializer):
    registrationNumber = serializers.CharField(source="registration_number", read_only=True)
    societyType = serializers.CharField(source="society_type", read_only=True)
    establishmentDate = serializers.DateField(source="establishment_date", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Society
        fields = [
            "id",
            "name",
            "registrationNumber",
            "societyType",
            "establishmentDate",
            "address",
            "status",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class PendingSocietySerializer(SocietySerializer):
    """Pending society row with admin contact and document count annotations."""

    adminName = serializers.CharField(source="admin_name", read_only=True)
    adminEmail = serializers.CharField(source="admin_email", read_only=True)
    adminPhone = serializers.CharField(source="admin_phone", read_only=True)
    documentCount = serializers.IntegerField(source="document_count", read_only=True)

    class Meta(SocietySerializer.Meta):
        fields = SocietySerializer.Meta.fields + [
            "adminName",
            "adminEmail",
            "adminPhone",
            "documentCount",
        ]
        read_only_fields = fields


class SocietyDetailSerializer(serializers.Serializer):
    """Society with its admin contact and documents."""

    society = SocietySerializer(read_only=True)
    admin = AdminContactSerializer(read_only=True, allow_null=True)
    documents = DocumentSerializer(many=True, read_only=True)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        society = data.pop("society")
        society["admin"] = data["admin"]
        society["documents"] = data["documents"]
        return society


class ApprovalSerializer(serializers.Serializer):
    """Serializer for approval decision."""

    status = serializers.ChoiceField(
        choices=[SocietyStatus.APPROVED, SocietyStatus.REJECTED], required=True
    )
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)
