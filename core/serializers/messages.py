from rest_framework import serializers

from .common import clean_text


class MessageCreateSerializer(serializers.Serializer):
    senderId = serializers.IntegerField(source='sender_id', min_value=1)
    receiverId = serializers.IntegerField(source='receiver_id', min_value=1)
    content = serializers.CharField(max_length=5000)

    def validate_content(self, v):
        return clean_text(v)


class MessageListQuerySerializer(serializers.Serializer):
    userId = serializers.IntegerField(source='user_id', min_value=1)


class ConversationQuerySerializer(serializers.Serializer):
    user1Id = serializers.IntegerField(source='user1_id', min_value=1)
    user2Id = serializers.IntegerField(source='user2_id', min_value=1)
