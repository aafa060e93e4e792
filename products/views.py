# products/views.py

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from .models import Product
from .serializers import ProductDetailSerializer, ProductSerializer
from .services import ProductLifecycleService, ProductUpdate


# ------------------
# 1. PRODUCT VIEWSET
# ------------------
class ProductViewSet(viewsets.GenericViewSet):
    """
    Public catalog plus the vendor's own product management.

    All reads and writes go through ProductLifecycleService; the viewset
    only translates between HTTP and service calls.
    """
    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    http_method_names = ['get', 'post', 'put', 'delete', 'head', 'options']
    service_class = ProductLifecycleService

    permission_classes = [IsAuthenticated]
    permission_classes_by_action = {
        'list': [AllowAny],
        'retrieve': [AllowAny],
    }

    def get_permissions(self):
        try:
            return [permission() for permission in self.permission_classes_by_action[self.action]]
        except KeyError:
            return [permission() for permission in self.permission_classes]

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return ProductDetailSerializer
        return super().get_serializer_class()

    @property
    def service(self):
        return self.service_class()

    def _list_response(self, products):
        return Response(self.get_serializer(products, many=True).data)

    def list(self, request):
        products = self.service.list_available(request.query_params.get('keyword'))
        return self._list_response(products)

    def retrieve(self, request, pk=None):
        product = self.service.get_by_id(pk)
        return Response(self.get_serializer(product).data)

    def create(self, request):
        product = self.service.create(request.user)
        return Response(self.get_serializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        changes = ProductUpdate.from_payload(request.data)
        product = self.service.update(pk, request.user, changes)
        return Response(self.get_serializer(product).data)

    def destroy(self, request, pk=None):
        message = self.service.soft_delete(pk, request.user)
        return Response({'message': message}, status=status.HTTP_200_OK)

    # --- Vendor listings ---
    @action(detail=False, methods=['get'], url_path='mywaitingproducts', url_name='waitlisted')
    def my_waiting_products(self, request):
        return self._list_response(self.service.list_own_waitlisted(request.user))

    @action(detail=False, methods=['get'], url_path='dispatchready', url_name='dispatch-ready')
    def dispatch_ready(self, request):
        return self._list_response(self.service.list_own_dispatch_ready(request.user))

    @action(detail=False, methods=['get'], url_path='dispatched', url_name='dispatched')
    def dispatched(self, request):
        return self._list_response(self.service.list_own_dispatched(request.user))

    @action(
        detail=False,
        methods=['put'],
        url_path=r'dispatchProduct/(?P<pk>[^/.]+)',
        url_name='dispatch',
    )
    def dispatch_product(self, request, pk=None):
        product = self.service.dispatch(pk, request.user)
        return Response(self.get_serializer(product).data)


# ------------------
# 2. REVIEW VIEWSET
# ------------------
class ReviewViewSet(viewsets.GenericViewSet):
    permission_classes = [IsAuthenticated]
    http_method_names = ['post']
    service_class = ProductLifecycleService

    def create(self, request, product_pk=None):
        message = self.service_class().add_review(
            product_pk,
            request.user,
            request.data.get('rating'),
            request.data.get('comment'),
        )
        return Response({'message': message}, status=status.HTTP_201_CREATED)
