from rest_framework import serializers

from .common import OptionalIdField, clean_text


class ForumCategoryCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    slug = serializers.SlugField(max_length=128)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def validate_name(self, v):
        return clean_text(v)


class ForumPostCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    content = serializers.CharField()
    categoryId = serializers.IntegerField(source='category_id', min_value=1)

    def validate_title(self, v):
        return clean_text(v)

    def validate_content(self, v):
        return clean_text(v)


class ForumCommentCreateSerializer(serializers.Serializer):
    content = serializers.CharField()
    postId = serializers.IntegerField(source='post_id', min_value=1)

    def validate_content(self, v):
        return clean_text(v)


class ForumPostListQuerySerializer(serializers.Serializer):
    categoryId = OptionalIdField(source='category_id')
