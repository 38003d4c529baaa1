"""Serializer for room audit snapshots."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Room


class RoomSnapshotSerializer(serializers.ModelSerializer):
    is_available = serializers.ReadOnlyField()

    class Meta:
        model = Room
        fields = [
            "id",
            "room_number",
            "room_type",
            "capacity",
            "price_per_night",
            "status",
            "is_available",
            "amenities",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
