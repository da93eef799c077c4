"""
Integration tests for the Onconet API.

These tests exercise the main user journeys end to end with the
database store: registration and session login, the forum, second
opinions, medical-record scoping and SOS contracts.  They use Django
REST Framework's APIClient within the APITestCase base class.

To run the tests:

```
pytest -q core/tests
```
"""

from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from core.entities import UserUpdate
from core.services.accounts import register_user
from core.storage import DatabaseStorage


@override_settings(PASSWORD_HASHERS=['django.contrib.auth.hashers.MD5PasswordHasher'])
class OnconetAPITests(APITestCase):
    def setUp(self) -> None:
        """Create a patient, a second patient and a professional."""
        self.store = DatabaseStorage()
        self.alice = register_user(self.store, {
            'username': 'alice', 'email': 'alice@x.com', 'password': 'alicepass',
            'full_name': 'Alice Rossi', 'user_type': 'patient',
        })
        self.carla = register_user(self.store, {
            'username': 'carla', 'email': 'carla@x.com', 'password': 'carlapass',
            'full_name': 'Carla Neri', 'user_type': 'patient',
        })
        self.doctor = register_user(self.store, {
            'username': 'dr_rossi', 'email': 'marco.rossi@hospital.it', 'password': 'doctorpass',
            'full_name': 'Dr. Marco Rossi', 'user_type': 'professional',
            'specialization': 'oncologia-medica', 'available_for_second_opinion': True,
        })

    def login(self, username: str, password: str):
        return self.client.post(reverse('auth-login'), {'username': username, 'password': password}, format='json')

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------
    def test_register_login_check_scenario(self) -> None:
        r = self.client.post(reverse('auth-register'), {
            'username': 'bruno', 'email': 'bruno@x.com', 'password': 'brunopass', 'fullName': 'Bruno Galli',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertNotIn('password', r.data)
        self.assertEqual(r.data['userType'], 'patient')
        self.assertTrue(r.data['isVerified'])

        self.client.post(reverse('auth-logout'))
        self.assertEqual(self.client.get(reverse('auth-check')).status_code, status.HTTP_401_UNAUTHORIZED)

        r = self.login('bruno', 'wrong-password')
        self.assertEqual(r.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(r.data['ok'])

        r = self.login('bruno', 'brunopass')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertNotIn('password', r.data)

        r = self.client.get(reverse('auth-check'))
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['username'], 'bruno')
        self.assertNotIn('password', r.data)

    def test_register_duplicates(self) -> None:
        r = self.client.post(reverse('auth-register'), {
            'username': 'alice', 'email': 'new@x.com', 'password': 'secret1', 'fullName': 'A',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data['error']['message'], 'Username already taken')

        r = self.client.post(reverse('auth-register'), {
            'username': 'alice2', 'email': 'alice@x.com', 'password': 'secret1', 'fullName': 'A',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data['error']['message'], 'Email already registered')

    def test_register_invalid_payload_lists_fields(self) -> None:
        r = self.client.post(reverse('auth-register'), {'username': 'zed', 'email': 'not-an-email'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data['error']['code'], 'validation_error')
        paths = {f['path'] for f in r.data['error']['fields']}
        self.assertTrue({'email', 'password', 'fullName'} <= paths)

    def test_register_ignores_server_assigned_fields(self) -> None:
        r = self.client.post(reverse('auth-register'), {
            'username': 'prof', 'email': 'prof@x.com', 'password': 'secret1', 'fullName': 'Prof',
            'userType': 'professional', 'isVerified': True, 'id': 999,
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertFalse(r.data['isVerified'])
        self.assertNotEqual(r.data['id'], 999)

    def test_login_missing_fields(self) -> None:
        r = self.client.post(reverse('auth-login'), {'username': 'alice'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data['error']['message'], 'Username and password required')

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def test_user_profile_read_and_update(self) -> None:
        url = reverse('user-detail', args=[self.alice.id])
        r = self.client.get(url)
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertNotIn('password', r.data)

        r = self.client.put(url, {'city': 'Torino'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_401_UNAUTHORIZED)

        self.login('carla', 'carlapass')
        r = self.client.put(url, {'city': 'Torino'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)

        self.login('alice', 'alicepass')
        r = self.client.put(url, {'city': 'Torino', 'username': 'hacked', 'userType': 'professional'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['city'], 'Torino')
        self.assertEqual(r.data['username'], 'alice')
        self.assertEqual(r.data['userType'], 'patient')

    def test_user_ids_must_be_numeric(self) -> None:
        r = self.client.get(reverse('user-detail', args=['abc']))
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        r = self.client.get(reverse('user-detail', args=[9999]))
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)

    def test_doctor_listings(self) -> None:
        r = self.client.get(reverse('doctors'))
        self.assertEqual([d['username'] for d in r.data], ['dr_rossi'])
        self.assertTrue(all('password' not in d for d in r.data))

        self.store.update_user(self.doctor.id, UserUpdate(available_for_second_opinion=False))
        r = self.client.get(reverse('doctors-second-opinion'))
        self.assertEqual(r.data, [])

    # ------------------------------------------------------------------
    # Forum
    # ------------------------------------------------------------------
    def test_forum_scenario(self) -> None:
        self.login('alice', 'alicepass')
        r = self.client.post(reverse('forum-categories'),
                             {'name': 'Supporto emotivo', 'slug': 'emotional-support'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        category_id = r.data['id']

        r = self.client.post(reverse('forum-posts'), {
            'title': 'Come affrontare la paura', 'content': 'Condividiamo esperienze', 'categoryId': category_id,
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data['viewCount'], 0)
        self.assertEqual(r.data['userId'], self.alice.id)
        post_id = r.data['id']

        for text in ('Non sei sola', 'Ti capisco'):
            r = self.client.post(reverse('forum-comments'), {'content': text, 'postId': post_id}, format='json')
            self.assertEqual(r.status_code, status.HTTP_201_CREATED)

        r = self.client.get(reverse('forum-post', args=[post_id]))
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        post = r.data['post']
        self.assertEqual(post['viewCount'], 1)
        self.assertEqual(post['commentCount'], 2)
        self.assertEqual(post['categoryName'], 'Supporto emotivo')
        self.assertEqual(post['author']['username'], 'alice')
        self.assertNotIn('password', post['author'])
        self.assertEqual([c['content'] for c in r.data['comments']], ['Non sei sola', 'Ti capisco'])
        for comment in r.data['comments']:
            self.assertEqual(comment['author']['username'], 'alice')
            self.assertNotIn('password', comment['author'])

        r = self.client.get(reverse('forum-post', args=[post_id]))
        self.assertEqual(r.data['post']['viewCount'], 2)

        r = self.client.get(reverse('forum-category', args=['emotional-support']))
        self.assertEqual(r.data['postCount'], 1)

    def test_forum_writes_need_a_session(self) -> None:
        r = self.client.post(reverse('forum-categories'), {'name': 'X', 'slug': 'x'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_401_UNAUTHORIZED)
        r = self.client.post(reverse('forum-posts'), {'title': 'T', 'content': 'C', 'categoryId': 1}, format='json')
        self.assertEqual(r.status_code, status.HTTP_401_UNAUTHORIZED)
        r = self.client.post(reverse('forum-comments'), {'content': 'C', 'postId': 1}, format='json')
        self.assertEqual(r.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_forum_bad_ids(self) -> None:
        self.assertEqual(self.client.get(reverse('forum-post', args=['abc'])).status_code, 400)
        self.assertEqual(self.client.get(reverse('forum-post', args=[9999])).status_code, 404)
        self.assertEqual(self.client.get(reverse('forum-posts') + '?categoryId=abc').status_code, 400)

        self.login('alice', 'alicepass')
        r = self.client.post(reverse('forum-posts'), {'title': 'T', 'content': 'C', 'categoryId': 9999}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data['error']['fields'][0]['path'], 'categoryId')

    def test_duplicate_category_slug(self) -> None:
        self.login('alice', 'alicepass')
        self.client.post(reverse('forum-categories'), {'name': 'A', 'slug': 'dup'}, format='json')
        r = self.client.post(reverse('forum-categories'), {'name': 'B', 'slug': 'dup'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data['error']['code'], 'duplicate')

    # ------------------------------------------------------------------
    # Second opinions
    # ------------------------------------------------------------------
    def test_second_opinion_lifecycle(self) -> None:
        r = self.client.post(reverse('second-opinion-requests'), {
            'patientId': self.alice.id, 'doctorId': self.doctor.id,
            'diagnosis': 'Carcinoma mammario', 'description': 'Richiedo un secondo parere',
            'status': 'completed',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data['status'], 'pending')
        rid = r.data['id']

        r = self.client.patch(reverse('second-opinion-status', args=[rid]), {'status': 'accepted'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['status'], 'accepted')

        r = self.client.patch(reverse('second-opinion-status', args=[rid]), {'status': 'pending'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)

        r = self.client.get(reverse('second-opinion-request', args=[rid]))
        self.assertEqual(r.data['patient']['username'], 'alice')
        self.assertEqual(r.data['doctor']['username'], 'dr_rossi')
        self.assertNotIn('password', r.data['patient'])
        self.assertNotIn('password', r.data['doctor'])

        r = self.client.get(reverse('second-opinion-requests') + f'?doctorId={self.doctor.id}')
        self.assertEqual([x['id'] for x in r.data], [rid])

    def test_second_opinion_status_errors(self) -> None:
        r = self.client.patch(reverse('second-opinion-status', args=[9999]), {'status': 'accepted'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)
        r = self.client.patch(reverse('second-opinion-status', args=[1]), {}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        r = self.client.patch(reverse('second-opinion-status', args=[1]), {'status': 'bogus'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------
    def test_messaging(self) -> None:
        r = self.client.post(reverse('messages'), {
            'senderId': self.alice.id, 'receiverId': self.doctor.id, 'content': 'Buongiorno dottore',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertFalse(r.data['isRead'])
        mid = r.data['id']
        self.client.post(reverse('messages'), {
            'senderId': self.doctor.id, 'receiverId': self.alice.id, 'content': 'Buongiorno Alice',
        }, format='json')

        r = self.client.get(reverse('messages') + f'?userId={self.doctor.id}')
        self.assertEqual([m['id'] for m in r.data], [mid])

        r = self.client.get(reverse('messages-conversation') + f'?user1Id={self.alice.id}&user2Id={self.doctor.id}')
        self.assertEqual(len(r.data), 2)

        r = self.client.patch(reverse('message-read', args=[mid]))
        self.assertEqual(r.data, {'success': True})
        self.assertTrue(self.store.get_message(mid).is_read)

        self.assertEqual(self.client.patch(reverse('message-read', args=[9999])).status_code, 404)
        self.assertEqual(self.client.get(reverse('messages')).status_code, 400)
        self.assertEqual(self.client.get(reverse('messages') + '?userId=abc').status_code, 400)

    # ------------------------------------------------------------------
    # Medical records
    # ------------------------------------------------------------------
    def test_medical_records_are_owner_scoped(self) -> None:
        r = self.client.post(reverse('medical-records'), {
            'patientId': self.alice.id, 'recordType': 'diagnosis', 'title': 'Biopsia',
            'description': 'Esito biopsia', 'date': '2025-02-01',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertTrue(r.data['isPrivate'])
        rid = r.data['id']
        url = reverse('medical-record', args=[rid])

        self.assertEqual(self.client.get(f'{url}?patientId={self.alice.id}').status_code, 200)
        self.assertEqual(self.client.get(f'{url}?patientId={self.carla.id}').status_code, 404)
        self.assertEqual(self.client.get(url).status_code, 400)

        r = self.client.put(url, {'patientId': self.carla.id, 'title': 'Rubato'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)
        r = self.client.put(url, {'patientId': self.alice.id, 'title': 'Biopsia (rev.)'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['title'], 'Biopsia (rev.)')
        self.assertEqual(r.data['recordType'], 'diagnosis')

        r = self.client.get(reverse('medical-records') + f'?patientId={self.carla.id}')
        self.assertEqual(r.data, [])

        self.assertEqual(self.client.delete(f'{url}?patientId={self.carla.id}').status_code, 404)
        r = self.client.delete(f'{url}?patientId={self.alice.id}')
        self.assertEqual(r.data, {'success': True})
        self.assertEqual(self.client.get(f'{url}?patientId={self.alice.id}').status_code, 404)

    def test_medical_record_validation(self) -> None:
        r = self.client.post(reverse('medical-records'), {
            'patientId': self.alice.id, 'recordType': 'horoscope', 'title': 'X', 'description': 'Y',
            'date': 'not-a-date',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        paths = {f['path'] for f in r.data['error']['fields']}
        self.assertEqual(paths, {'recordType', 'date'})

    # ------------------------------------------------------------------
    # SOS contracts
    # ------------------------------------------------------------------
    def test_sos_contract_lifecycle(self) -> None:
        r = self.client.post(reverse('sos-contracts'), {
            'patientId': self.alice.id, 'doctorId': self.doctor.id, 'emergencyType': 'oncological',
            'isActive': True, 'consentGiven': True, 'sharedRecordIds': [1, 2],
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertFalse(r.data['isActive'])
        self.assertFalse(r.data['isExpired'])
        self.assertEqual(r.data['contractType'], 'sos')
        self.assertIsNotNone(r.data['consentDate'])
        cid = r.data['id']

        for _ in range(2):
            r = self.client.patch(reverse('sos-contract-activate', args=[cid]))
            self.assertEqual(r.status_code, status.HTTP_200_OK)
            self.assertTrue(r.data['isActive'])
        r = self.client.patch(reverse('sos-contract-deactivate', args=[cid]))
        self.assertFalse(r.data['isActive'])

        r = self.client.get(reverse('sos-contracts') + f'?doctorId={self.doctor.id}')
        self.assertEqual([c['id'] for c in r.data], [cid])
        self.assertEqual(self.client.get(reverse('sos-contracts')).status_code, 400)
        self.assertEqual(self.client.patch(reverse('sos-contract-activate', args=[9999])).status_code, 404)
        self.assertEqual(self.client.get(reverse('sos-contract', args=['x'])).status_code, 400)

    def test_sos_contract_expiry_flag(self) -> None:
        r = self.client.post(reverse('sos-contracts'), {
            'patientId': self.alice.id, 'doctorId': self.doctor.id, 'emergencyType': 'urgent',
            'expiresAt': '2000-01-01T00:00:00Z',
        }, format='json')
        self.assertTrue(r.data['isExpired'])
        self.assertIsNone(r.data['consentDate'])

    # ------------------------------------------------------------------
    # Listings & ops
    # ------------------------------------------------------------------
    def test_pharmacy_listing_filters(self) -> None:
        milano = self.store.create_pharmacy({'name': 'San Paolo', 'address': 'Via Roma 123', 'city': 'Milano',
                                             'region': 'Lombardia', 'specializations': ['preparazioni-galeniche']})
        self.store.create_pharmacy({'name': 'Centrale', 'address': 'Corso Italia 45', 'city': 'Roma',
                                    'region': 'Lazio'})
        r = self.client.get(reverse('pharmacies') + '?region=Lombardia')
        self.assertEqual([p['id'] for p in r.data], [milano.id])
        r = self.client.get(reverse('pharmacies'))
        self.assertEqual(len(r.data), 2)
        r = self.client.get(reverse('pharmacy-detail', args=[milano.id]))
        self.assertEqual(r.data['specializations'], ['preparazioni-galeniche'])
        self.assertEqual(self.client.get(reverse('pharmacy-detail', args=[9999])).status_code, 404)

    def test_healthz(self) -> None:
        r = self.client.get(reverse('healthz'))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {'ok': True, 'storage': 'database'})

    # ------------------------------------------------------------------
    # CSRF, audit trail, query edge cases
    # ------------------------------------------------------------------
    def test_session_writes_with_csrf_enforced(self) -> None:
        client = APIClient(enforce_csrf_checks=True)
        r = client.get(reverse('auth-check'))
        self.assertEqual(r.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn('csrftoken', client.cookies)

        r = client.post(reverse('auth-login'), {'username': 'alice', 'password': 'alicepass'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        token = client.cookies['csrftoken'].value

        r = client.post(reverse('forum-categories'), {'name': 'Leucemia', 'slug': 'leukemia'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)

        r = client.post(reverse('forum-categories'), {'name': 'Leucemia', 'slug': 'leukemia'}, format='json',
                        HTTP_X_CSRFTOKEN=token)
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)

        r = client.put(reverse('user-detail', args=[self.alice.id]), {'city': 'Torino'}, format='json',
                       HTTP_X_CSRFTOKEN=token)
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['city'], 'Torino')

        r = client.post(reverse('auth-logout'), HTTP_X_CSRFTOKEN=token)
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(client.get(reverse('auth-check')).status_code, status.HTTP_401_UNAUTHORIZED)

    def test_register_issues_csrf_cookie(self) -> None:
        client = APIClient(enforce_csrf_checks=True)
        r = client.post(reverse('auth-register'), {
            'username': 'bruno', 'email': 'bruno@x.com', 'password': 'brunopass', 'fullName': 'Bruno Galli',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        token = client.cookies['csrftoken'].value

        r = client.post(reverse('messages'), {
            'senderId': r.data['id'], 'receiverId': self.doctor.id, 'content': 'Buongiorno',
        }, format='json', HTTP_X_CSRFTOKEN=token)
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)

    def test_audit_trail_is_persisted(self) -> None:
        self.login('alice', 'wrong')
        self.login('alice', 'alicepass')
        logins = self.store.list_audit_events(object_type='user')
        self.assertEqual([(e.action, e.user_id, e.detail['result']) for e in logins],
                         [('login', None, 'fail'), ('login', self.alice.id, 'ok')])
        self.assertEqual(logins[1].ip_address, '127.0.0.1')

        r = self.client.post(reverse('sos-contracts'), {
            'patientId': self.alice.id, 'doctorId': self.doctor.id, 'emergencyType': 'general',
        }, format='json')
        cid = r.data['id']
        self.client.patch(reverse('sos-contract-activate', args=[cid]))
        self.client.patch(reverse('sos-contract-deactivate', args=[cid]))

        events = self.store.list_audit_events(object_type='sos_contract', object_id=cid)
        self.assertEqual([e.action for e in events], ['activate', 'deactivate'])
        self.assertEqual(events[0].user_id, self.alice.id)
        self.assertEqual(events[0].detail, {'patientId': self.alice.id, 'doctorId': self.doctor.id})

    def test_post_view_count_accumulates_in_database(self) -> None:
        category = self.store.create_forum_category({'name': 'Linfomi', 'slug': 'lymphoma'})
        post = self.store.create_forum_post({'title': 'T', 'content': 'C', 'user_id': self.alice.id,
                                             'category_id': category.id})
        for expected in range(1, 6):
            r = self.client.get(reverse('forum-post', args=[post.id]))
            self.assertEqual(r.data['post']['viewCount'], expected)
        self.assertEqual(self.store.get_forum_post(post.id).view_count, 5)

    def test_blank_list_filters_mean_no_filter(self) -> None:
        category = self.store.create_forum_category({'name': 'Linfomi', 'slug': 'lymphoma'})
        self.store.create_forum_post({'title': 'T', 'content': 'C', 'user_id': self.alice.id,
                                      'category_id': category.id})

        r = self.client.get(reverse('forum-posts') + '?categoryId=')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(len(r.data), 1)
        self.assertEqual(self.client.get(reverse('forum-posts') + '?categoryId=abc').status_code, 400)
        self.assertEqual(self.client.get(reverse('forum-posts') + '?categoryId=0').status_code, 400)

        self.store.create_second_opinion_request({
            'patient_id': self.alice.id, 'doctor_id': self.doctor.id, 'diagnosis': 'D', 'description': 'X',
        })
        r = self.client.get(reverse('second-opinion-requests') + f'?patientId=&doctorId={self.doctor.id}')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(len(r.data), 1)

        r = self.client.get(reverse('sos-contracts') + '?patientId=&doctorId=')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
