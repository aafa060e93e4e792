from django.contrib.auth import get_user_model
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from products.models import Product

User = get_user_model()


class ProductApiTestCase(APITestCase):
    def setUp(self):
        self.owner = User.objects.create_user(
            username='owner', email='owner@example.com', password='testpass123', name='Owner A',
        )
        self.other = User.objects.create_user(
            username='other', email='other@example.com', password='testpass123', name='Owner B',
        )
        self.reviewer = User.objects.create_user(
            username='reviewer', email='reviewer@example.com', password='testpass123', name='Reviewer X',
        )

    def make_product(self, owner=None, name='Widget', remaining=5, status=Product.PLACED):
        return Product.objects.create(
            user=owner or self.owner,
            name=name,
            image='/images/widget.jpg',
            price=10,
            bundle_quantity=remaining,
            remaining_quantity=remaining,
            status=status,
        )

    def update_payload(self, **overrides):
        payload = {
            'name': 'Widget',
            'price': 10,
            'image': '/img.jpg',
            'bundleQuantity': 5,
            'remainingQuantity': 5,
        }
        payload.update(overrides)
        return payload


class PublicCatalogApiTest(ProductApiTestCase):
    def test_list_is_public_and_hides_sold_out(self):
        available = self.make_product(name='Red Lamp')
        self.make_product(name='Sold Out Lamp', remaining=0)

        response = self.client.get(reverse('product-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['id'] for p in response.json()], [available.pk])

    def test_list_keyword_filter(self):
        self.make_product(name='Red Lamp')
        self.make_product(name='Garden Chair')

        response = self.client.get(reverse('product-list'), {'keyword': 'chair'})

        self.assertEqual([p['name'] for p in response.json()], ['Garden Chair'])

    def test_list_payload_shape(self):
        self.make_product()
        product = self.client.get(reverse('product-list')).json()[0]

        self.assertEqual(product['user'], self.owner.pk)
        self.assertEqual(product['price'], 10)
        self.assertEqual(product['bundleQuantity'], 5)
        self.assertEqual(product['remainingQuantity'], 5)
        self.assertEqual(product['status'], 'Placed')
        self.assertEqual(product['reviews'], [])
        self.assertEqual(product['numReviews'], 0)
        self.assertIn('createdAt', product)

    def test_retrieve_includes_owner_name_and_email(self):
        product = self.make_product()

        response = self.client.get(reverse('product-detail', kwargs={'pk': product.pk}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.json()['user'],
            {'id': self.owner.pk, 'name': 'Owner A', 'email': 'owner@example.com'},
        )

    def test_retrieve_sold_out_product_still_works(self):
        product = self.make_product(remaining=0)
        response = self.client.get(reverse('product-detail', kwargs={'pk': product.pk}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_retrieve_missing(self):
        response = self.client.get(reverse('product-detail', kwargs={'pk': 9999}))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json(), {'message': 'Product not found'})

    def test_retrieve_malformed_id(self):
        response = self.client.get('/api/products/abc/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json(), {'message': 'Product not found'})


class VendorProductApiTest(ProductApiTestCase):
    def test_create_requires_authentication(self):
        response = self.client.post(reverse('product-list'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(Product.objects.exists())

    def test_create(self):
        self.client.force_authenticate(user=self.owner)

        response = self.client.post(reverse('product-list'))

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        body = response.json()
        self.assertEqual(body['name'], 'Sample name')
        self.assertEqual(body['image'], '/images/sample.jpg')
        self.assertEqual(body['user'], self.owner.pk)
        self.assertEqual(body['status'], 'Placed')
        self.assertTrue(Product.objects.filter(pk=body['id']).exists())

    def test_update_by_owner(self):
        product = self.make_product(name='Old name')
        self.client.force_authenticate(user=self.owner)

        response = self.client.put(
            reverse('product-detail', kwargs={'pk': product.pk}),
            self.update_payload(name='New name', remainingQuantity=2),
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['name'], 'New name')
        self.assertEqual(response.json()['remainingQuantity'], 2)

    def test_update_by_non_owner_looks_like_missing_product(self):
        product = self.make_product()
        self.client.force_authenticate(user=self.other)

        response = self.client.put(
            reverse('product-detail', kwargs={'pk': product.pk}),
            self.update_payload(name='Hijacked'),
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json(), {'message': 'Product not found'})
        product.refresh_from_db()
        self.assertEqual(product.name, 'Widget')

    def test_update_with_missing_fields_fails(self):
        product = self.make_product()
        self.client.force_authenticate(user=self.owner)

        response = self.client.put(
            reverse('product-detail', kwargs={'pk': product.pk}),
            {'name': 'Just the name'},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIn('price', response.json()['message'])

    def test_update_with_fractional_quantity_fails(self):
        product = self.make_product()
        self.client.force_authenticate(user=self.owner)

        response = self.client.put(
            reverse('product-detail', kwargs={'pk': product.pk}),
            self.update_payload(remainingQuantity=2.5),
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIn('remaining_quantity', response.json()['message'])
        product.refresh_from_db()
        self.assertEqual(product.remaining_quantity, 5)

    def test_patch_is_not_supported(self):
        product = self.make_product()
        self.client.force_authenticate(user=self.owner)
        response = self.client.patch(
            reverse('product-detail', kwargs={'pk': product.pk}), {'name': 'x'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

    def test_delete_is_soft(self):
        product = self.make_product()
        self.client.force_authenticate(user=self.owner)

        response = self.client.delete(reverse('product-detail', kwargs={'pk': product.pk}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {'message': 'Product removed'})
        product.refresh_from_db()
        self.assertEqual(product.status, 'Cancelled')
        self.assertEqual(product.remaining_quantity, 0)

    def test_delete_by_non_owner(self):
        product = self.make_product()
        self.client.force_authenticate(user=self.other)

        response = self.client.delete(reverse('product-detail', kwargs={'pk': product.pk}))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        product.refresh_from_db()
        self.assertEqual(product.status, 'Placed')

    def test_own_listings(self):
        waiting = self.make_product(name='Waiting', remaining=3)
        ready = self.make_product(name='Ready', remaining=0)
        shipped = self.make_product(name='Shipped', remaining=0, status=Product.DISPATCHED)
        self.make_product(owner=self.other, name='Not mine', remaining=3)
        self.client.force_authenticate(user=self.owner)

        waitlisted = self.client.get(reverse('product-waitlisted')).json()
        dispatch_ready = self.client.get(reverse('product-dispatch-ready')).json()
        dispatched = self.client.get(reverse('product-dispatched')).json()

        self.assertEqual([p['id'] for p in waitlisted], [waiting.pk])
        self.assertEqual([p['id'] for p in dispatch_ready], [ready.pk])
        self.assertEqual([p['id'] for p in dispatched], [shipped.pk])

    def test_own_listings_require_authentication(self):
        for name in ('product-waitlisted', 'product-dispatch-ready', 'product-dispatched'):
            response = self.client.get(reverse(name))
            self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_listing_routes_are_not_read_as_product_ids(self):
        self.assertEqual(reverse('product-waitlisted'), '/api/products/mywaitingproducts/')
        self.assertEqual(reverse('product-dispatch-ready'), '/api/products/dispatchready/')
        self.assertEqual(reverse('product-dispatched'), '/api/products/dispatched/')


class DispatchApiTest(ProductApiTestCase):
    def test_dispatch_url(self):
        self.assertEqual(
            reverse('product-dispatch', kwargs={'pk': 12}),
            '/api/products/dispatchProduct/12/',
        )

    def test_dispatch_by_any_authenticated_user(self):
        product = self.make_product(remaining=0)
        self.client.force_authenticate(user=self.other)

        response = self.client.put(reverse('product-dispatch', kwargs={'pk': product.pk}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['status'], 'Dispatched')

    def test_dispatch_requires_authentication(self):
        product = self.make_product()
        response = self.client.put(reverse('product-dispatch', kwargs={'pk': product.pk}))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_dispatch_missing_product(self):
        self.client.force_authenticate(user=self.owner)
        response = self.client.put(reverse('product-dispatch', kwargs={'pk': 9999}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json(), {'message': 'Product not found'})

    def test_dispatch_after_delete(self):
        product = self.make_product()
        self.client.force_authenticate(user=self.owner)

        self.client.delete(reverse('product-detail', kwargs={'pk': product.pk}))
        response = self.client.put(reverse('product-dispatch', kwargs={'pk': product.pk}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['status'], 'Dispatched')
        self.assertEqual(response.json()['remainingQuantity'], 0)

    @override_settings(PRODUCT_OPERATION_POLICIES={'dispatch': {'requires_ownership': True}})
    def test_dispatch_with_ownership_policy(self):
        product = self.make_product()
        self.client.force_authenticate(user=self.other)

        response = self.client.put(reverse('product-dispatch', kwargs={'pk': product.pk}))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        product.refresh_from_db()
        self.assertEqual(product.status, 'Placed')


class ReviewApiTest(ProductApiTestCase):
    def reviews_url(self, product):
        return reverse('product-reviews-list', kwargs={'product_pk': product.pk})

    def test_review_url(self):
        product = self.make_product()
        self.assertEqual(self.reviews_url(product), f'/api/products/{product.pk}/reviews/')

    def test_add_review(self):
        product = self.make_product()
        self.client.force_authenticate(user=self.reviewer)

        response = self.client.post(
            self.reviews_url(product), {'rating': 4, 'comment': 'Nice'}, format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json(), {'message': 'Review added'})

        detail = self.client.get(reverse('product-detail', kwargs={'pk': product.pk})).json()
        self.assertEqual(detail['numReviews'], 1)
        self.assertEqual(detail['rating'], 4.0)
        self.assertEqual(detail['reviews'][0]['name'], 'Reviewer X')
        self.assertEqual(detail['reviews'][0]['comment'], 'Nice')

    def test_reviews_average(self):
        product = self.make_product()
        for user, rating in ((self.reviewer, 4), (self.other, 5)):
            self.client.force_authenticate(user=user)
            self.client.post(self.reviews_url(product), {'rating': rating, 'comment': ''}, format='json')

        product.refresh_from_db()
        self.assertEqual(product.num_reviews, 2)
        self.assertEqual(product.rating, 4.5)

    def test_duplicate_review(self):
        product = self.make_product()
        self.client.force_authenticate(user=self.reviewer)
        self.client.post(self.reviews_url(product), {'rating': 4, 'comment': 'Nice'}, format='json')

        response = self.client.post(
            self.reviews_url(product), {'rating': 5, 'comment': 'Again'}, format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json(), {'message': 'Product already reviewed'})

    def test_infinite_rating_keeps_catalog_readable(self):
        product = self.make_product()
        self.client.force_authenticate(user=self.reviewer)

        response = self.client.post(
            self.reviews_url(product), {'rating': 'Infinity', 'comment': 'Best ever'}, format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json(), {'message': 'Review validation failed: rating must be a number'})

        self.client.force_authenticate(user=None)
        listing = self.client.get(reverse('product-list'))
        self.assertEqual(listing.status_code, status.HTTP_200_OK)
        self.assertEqual(listing.json()[0]['numReviews'], 0)

        detail = self.client.get(reverse('product-detail', kwargs={'pk': product.pk}))
        self.assertEqual(detail.status_code, status.HTTP_200_OK)

    def test_review_requires_authentication(self):
        product = self.make_product()
        response = self.client.post(self.reviews_url(product), {'rating': 4}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_review_missing_product(self):
        self.client.force_authenticate(user=self.reviewer)
        response = self.client.post(
            reverse('product-reviews-list', kwargs={'product_pk': 9999}),
            {'rating': 4, 'comment': 'Ghost'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class EndToEndScenarioTest(ProductApiTestCase):
    def test_vendor_lifecycle(self):
        # owner A creates and fills in the product
        self.client.force_authenticate(user=self.owner)
        product_id = self.client.post(reverse('product-list')).json()['id']
        detail_url = reverse('product-detail', kwargs={'pk': product_id})

        response = self.client.put(detail_url, self.update_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        detail = self.client.get(detail_url).json()
        self.assertEqual(detail['name'], 'Widget')
        self.assertEqual(detail['remainingQuantity'], 5)

        # owner B cannot touch it
        self.client.force_authenticate(user=self.other)
        response = self.client.put(detail_url, self.update_payload(name='Stolen'), format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        # user X reviews once; the second attempt bounces
        self.client.force_authenticate(user=self.reviewer)
        reviews_url = reverse('product-reviews-list', kwargs={'product_pk': product_id})
        first = self.client.post(reviews_url, {'rating': 4, 'comment': 'ok'}, format='json')
        second = self.client.post(reviews_url, {'rating': 5, 'comment': 'better'}, format='json')

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.client.get(detail_url).json()['numReviews'], 1)
