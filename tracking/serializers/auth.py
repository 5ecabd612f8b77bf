from rest_framework import serializers

from ..models import User
from .common import CleanCharField


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(required=False, allow_blank=True)
    email = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField()

    def validate(self, attrs):
        identifier = (attrs.get('username') or attrs.get('email') or '').strip()
        if not identifier:
            raise serializers.ValidationError({'username': ['اسم المستخدم أو البريد الإلكتروني مطلوب']})
        attrs['identifier'] = identifier
        return attrs

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('كلمة المرور مطلوبة')
        return v


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150, required=False)
    name = CleanCharField(max_length=255)
    email = serializers.EmailField()
    phone = CleanCharField(max_length=32, required=False, allow_blank=True)
    password = serializers.CharField(min_length=6, write_only=True)
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES, default=User.ROLE_NURSE)
    department = CleanCharField(max_length=255, required=False, allow_blank=True)

    def validate(self, attrs):
        attrs['username'] = (attrs.get('username') or attrs['email']).strip()
        if User.objects.filter(username=attrs['username']).exists():
            raise serializers.ValidationError({'username': ['اسم المستخدم مستخدم بالفعل']})
        if User.objects.filter(email__iexact=attrs['email']).exists():
            raise serializers.ValidationError({'email': ['البريد الإلكتروني مستخدم بالفعل']})
        return attrs
