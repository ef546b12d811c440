# users/serializers.py

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from permissions.roles import effective_capabilities_for

User = get_user_model()


# ---------------- REGISTER ----------------
class RegisterSerializer(serializers.ModelSerializer):
    """
    Self-registration always yields a read-only VIEWER account.
    Staff roles are granted afterwards through StaffRoleSerializer.
    """

    password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={"input_type": "password"},
    )

    class Meta:
        model = User
        fields = ["email", "password", "first_name", "last_name"]

    def create(self, validated_data):
        return User.objects.create_user(
            email=validated_data["email"],
            password=validated_data["password"],
            first_name=validated_data.get("first_name", ""),
            last_name=validated_data.get("last_name", ""),
            role=User.ROLE_VIEWER,
        )


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={"input_type": "password"})


# ---------------- OUTPUT ----------------
class UserSerializer(serializers.ModelSerializer):
    """
    Frontend-facing user. `capabilities` is what the client uses to decide
    which inventory / sales / ledger screens to show.
    """

    capabilities = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "email", "username", "first_name", "last_name", "role", "capabilities"]
        read_only_fields = ["id", "email", "username", "first_name", "last_name", "role"]

    def get_capabilities(self, obj) -> list[str]:
        return sorted(effective_capabilities_for(obj))


# ---------------- ROLE MANAGEMENT ----------------
class StaffRoleSerializer(serializers.ModelSerializer):
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES)

    class Meta:
        model = User
        fields = ["role", "is_active"]

    def validate(self, attrs):
        request = self.context.get("request")
        if request and self.instance is not None and self.instance.pk == request.user.pk:
            raise serializers.ValidationError("You cannot change your own role or status.")
        return attrs
