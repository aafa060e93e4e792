from django.conf import settings
from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from products.models import Product

User = get_user_model()

PASSWORD = 'Correct-Horse-42'


class RegistrationAndLoginTest(APITestCase):
    def register(self, email='vera@example.com', username='vera', name='Vera Vendor'):
        return self.client.post('/api/auth/users/', {
            'email': email,
            'username': username,
            'name': name,
            'password': PASSWORD,
            're_password': PASSWORD,
        }, format='json')

    def login(self, email='vera@example.com'):
        return self.client.post('/api/auth/jwt/create/', {
            'email': email,
            'password': PASSWORD,
        }, format='json')

    def test_register(self):
        with self.assertLogs('users.signals', level='INFO'):
            response = self.register()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        user = User.objects.get(email='vera@example.com')
        self.assertEqual(user.name, 'Vera Vendor')
        self.assertTrue(user.check_password(PASSWORD))

    def test_register_rejects_mismatched_passwords(self):
        response = self.client.post('/api/auth/users/', {
            'email': 'vera@example.com',
            'username': 'vera',
            'name': 'Vera Vendor',
            'password': PASSWORD,
            're_password': PASSWORD + 'x',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_jwt_login_and_current_user(self):
        self.register()
        response = self.login()
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.client.credentials(HTTP_AUTHORIZATION=f"JWT {response.json()['access']}")
        me = self.client.get('/api/auth/users/me/')

        self.assertEqual(me.status_code, status.HTTP_200_OK)
        self.assertEqual(me.json()['name'], 'Vera Vendor')
        self.assertEqual(me.json()['email'], 'vera@example.com')

    def test_jwt_identity_owns_created_product(self):
        self.register()
        token = self.login().json()['access']
        self.client.credentials(HTTP_AUTHORIZATION=f'JWT {token}')

        response = self.client.post(reverse('product-list'))

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        product = Product.objects.get(pk=response.json()['id'])
        self.assertEqual(product.user.email, 'vera@example.com')

    def test_only_jwt_and_session_auth_are_wired(self):
        self.assertNotIn('rest_framework.authtoken', settings.INSTALLED_APPS)
        self.assertEqual(
            settings.REST_FRAMEWORK['DEFAULT_AUTHENTICATION_CLASSES'],
            (
                'rest_framework_simplejwt.authentication.JWTAuthentication',
                'rest_framework.authentication.SessionAuthentication',
            ),
        )

    def test_bad_token_is_rejected(self):
        self.client.credentials(HTTP_AUTHORIZATION='JWT not-a-token')
        response = self.client.post(reverse('product-list'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class AdminSiteTest(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_superuser(
            username='admin', email='admin@example.com', password=PASSWORD, name='Admin',
        )
        self.vendor = User.objects.create_user(
            username='vendor', email='vendor@example.com', password=PASSWORD, name='Vendor',
        )
        self.product = Product.objects.create(
            user=self.vendor, name='Widget', image='/images/widget.jpg', price=10,
            bundle_quantity=5, remaining_quantity=5,
        )
        self.client.force_login(self.admin)

    def test_product_changelist(self):
        response = self.client.get(reverse('admin:products_product_changelist'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Widget')

    def test_product_change_page(self):
        response = self.client.get(reverse('admin:products_product_change', args=[self.product.pk]))
        self.assertEqual(response.status_code, 200)

    def test_user_changelist(self):
        response = self.client.get(reverse('admin:users_customuser_changelist'))
        self.assertContains(response, 'vendor@example.com')

    def test_cancel_action(self):
        response = self.client.post(reverse('admin:products_product_changelist'), {
            'action': 'mark_cancelled',
            '_selected_action': [self.product.pk],
        })
        self.assertEqual(response.status_code, 302)
        self.product.refresh_from_db()
        self.assertEqual(self.product.status, Product.CANCELLED)
        self.assertEqual(self.product.remaining_quantity, 0)
