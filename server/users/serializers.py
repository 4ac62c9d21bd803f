from rest_framework import serializers
from .models import User
from django.contrib.auth import authenticate
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.tokens import RefreshToken, TokenError
import phonenumbers


def validate_international_phone(value):
    """Phone numbers are optional but must carry a country code when given."""
    if not value:
        return value

    if not value.startswith('+'):
        raise serializers.ValidationError(
            "Phone number must include country code (e.g., +9779800000000)"
        )

    try:
        parsed = phonenumbers.parse(value, None)
        if not phonenumbers.is_valid_number(parsed):
            raise serializers.ValidationError("Invalid phone number")
    except phonenumbers.NumberParseException:
        raise serializers.ValidationError(
            "Invalid phone number format. Use international format: +[country code][number]"
        )

    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)


class UserSummarySerializer(serializers.ModelSerializer):

    class Meta:
        model = User
        fields = ['id', 'first_name', 'last_name', 'email', 'role']


class UserRegisterSerializer(serializers.ModelSerializer):

    first_name = serializers.CharField(min_length=2, max_length=50)
    last_name = serializers.CharField(min_length=2, max_length=50)
    password = serializers.CharField(max_length=68, min_length=6, write_only=True)
    role = serializers.ChoiceField(
        choices=[User.ROLE_GUEST, User.ROLE_HOST], default=User.ROLE_GUEST
    )

    class Meta:

        model = User
        fields = ['id', 'email', 'first_name', 'last_name', 'phone', 'role', 'password']

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('User already exists with this email')
        return value

    def validate_phone(self, value):
        return validate_international_phone(value)

    def validate(self, attrs):
        candidate = User(
            email=attrs.get('email', ''),
            first_name=attrs.get('first_name', ''),
            last_name=attrs.get('last_name', ''),
        )
        try:
            validate_password(attrs.get('password'), user=candidate)
        except DjangoValidationError as e:
            raise serializers.ValidationError({'password': list(e.messages)})
        return attrs

    def create(self, validated_data):

        user = User.objects.create_user(
            email = validated_data['email'],
            first_name = validated_data['first_name'],
            last_name = validated_data['last_name'],
            phone = validated_data.get('phone', ''),
            role = validated_data.get('role', User.ROLE_GUEST),
            password = validated_data['password'],
        )
        return user

    def to_representation(self, instance):
        tokens = instance.tokens()
        return {
            'user': UserSummarySerializer(instance).data,
            'access_token': tokens['access'],
            'refresh_token': tokens['refresh'],
        }


class LoginSerializer(serializers.Serializer):
    email    = serializers.EmailField(max_length=255)
    password = serializers.CharField(write_only=True, max_length=128)

    def validate(self, attrs):
        email    = attrs.get('email')
        password = attrs.get('password')
        user = authenticate(
            request=self.context.get('request'),
            email=email,
            password=password
        )

        if not user:
            raise AuthenticationFailed("Invalid credentials, try again.")

        tokens = user.tokens()

        return {
            'user':          UserSummarySerializer(user).data,
            'access_token':  tokens['access'],
            'refresh_token': tokens['refresh'],
        }

    def to_representation(self, validated_data):
        return validated_data

class LogoutSerializer(serializers.Serializer):
    refresh_token = serializers.CharField()

    def validate(self, attrs):
        self.token = attrs['refresh_token']
        return attrs

    def save(self, **kwargs):
        try:
            RefreshToken(self.token).blacklist()
        except TokenError:
            raise serializers.ValidationError('Invalid or expired token')


class UserProfileSerializer(serializers.ModelSerializer):
    """Serializer for user profile - returns complete user information"""

    class Meta:
        model = User
        fields = [
            'id', 'email', 'first_name', 'last_name', 'phone', 'avatar',
            'role', 'is_active', 'is_verified', 'date_joined'
        ]
        read_only_fields = ['id', 'email', 'date_joined', 'role', 'is_active', 'is_verified']

    def validate_phone(self, value):
        return validate_international_phone(value)


class UserListSerializer(serializers.ModelSerializer):
    """serializer for admin user management"""

    class Meta:
        model = User
        fields = [
            'id', 'email', 'first_name', 'last_name', 'phone',
            'role', 'is_active', 'is_verified', 'is_staff', 'date_joined'
        ]
        read_only_fields = ['email', 'date_joined']
