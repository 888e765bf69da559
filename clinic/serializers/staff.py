from rest_framework import serializers


class StaffQuerySerializer(serializers.Serializer):
    """Raw staff search parameters.

    Only the shape is checked here; the tokens themselves are decoded by
    :func:`clinic.services.staff.decode_staff_query`, which owns the
    400 responses for unknown filters, sorts and identifiers.
    """
    identifier = serializers.CharField(required=False, allow_blank=True, max_length=16)
    value = serializers.CharField(required=False, allow_blank=True, max_length=255)
    filter = serializers.CharField(required=False, allow_blank=True, max_length=32)
    sort = serializers.CharField(required=False, allow_blank=True, max_length=32)
    page = serializers.IntegerField()
