"""Guest profile input and snapshot serializers."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Guest


class GuestSnapshotSerializer(serializers.ModelSerializer):
    class Meta:
        model = Guest
        fields = [
            "id",
            "full_name",
            "email",
            "phone",
            "address",
            "id_number",
            "nationality",
            "created_at",
        ]
        read_only_fields = fields


class GuestProfileSerializer(serializers.Serializer):
    """Full guest profile carried by a booking request."""

    full_name = serializers.CharField(max_length=200, trim_whitespace=True)
    email = serializers.EmailField(max_length=254)
    phone = serializers.CharField(max_length=32)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    id_number = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")
    nationality = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")


class GuestPatchSerializer(serializers.Serializer):
    """Guest profile fields a booking update may change."""

    full_name = serializers.CharField(max_length=200, required=False)
    email = serializers.EmailField(max_length=254, required=False)
    phone = serializers.CharField(max_length=32, required=False)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    id_number = serializers.CharField(max_length=64, required=False, allow_blank=True)
    nationality = serializers.CharField(max_length=64, required=False, allow_blank=True)

    def validate(self, attrs):  # type: ignore
        if not attrs:
            raise serializers.ValidationError("Guest patch must change at least one field.")
        return attrs
